"""User domain models for EstuArriendo.

The marketplace distinguishes tenants (students looking for housing),
owners (individuals or agencies publishing listings), admins and
super-admins who run the back office. Owners can buy a premium plan by
uploading a payment proof and every user can go through an identity
verification workflow; both states live on the user row so listings and
permissions can read them without extra joins.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import MinLengthValidator, RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^[0-9+]{10,15}$",
    message=_("El teléfono debe tener entre 10 y 15 caracteres, solo números y '+'."),
)


class CustomUserManager(BaseUserManager):
    """Manager that logs users in by email instead of a username."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("El email es obligatorio.")
        email = self.normalize_email(email)

        for field in ("phone", "whatsapp"):
            if extra_fields.get(field):
                extra_fields[field] = self.normalize_phone(extra_fields[field])

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("user_type", CustomUser.UserType.TENANT)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("user_type", CustomUser.UserType.SUPER_ADMIN)
        extra_fields.setdefault("is_verified", True)
        extra_fields.setdefault("verification_status", CustomUser.VerificationStatus.VERIFIED)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Strip spaces, dashes and parentheses before storing a phone number."""
        for char in (" ", "-", "(", ")"):
            phone = phone.replace(char, "")
        return phone


class CustomUser(AbstractUser):
    """Marketplace account: tenant, owner or back-office staff."""

    class UserType(models.TextChoices):
        TENANT = "tenant", _("Estudiante / inquilino")
        OWNER = "owner", _("Propietario")
        ADMIN = "admin", _("Administrador")
        SUPER_ADMIN = "super_admin", _("Super administrador")

    class OwnerRole(models.TextChoices):
        INDIVIDUAL = "individual", _("Persona natural")
        AGENCY = "agency", _("Inmobiliaria")

    class IdType(models.TextChoices):
        CC = "CC", _("Cédula de ciudadanía")
        NIT = "NIT", _("NIT")
        CE = "CE", _("Cédula de extranjería")
        PASSPORT = "Pasaporte", _("Pasaporte")

    class PaymentPreference(models.TextChoices):
        PSE = "PSE", _("PSE")
        CREDIT_CARD = "CreditCard", _("Tarjeta de crédito")
        NEQUI = "Nequi", _("Nequi")
        DAVIPLATA = "Daviplata", _("Daviplata")
        BANK_TRANSFER = "BankTransfer", _("Transferencia bancaria")

    class Plan(models.TextChoices):
        FREE = "free", _("Gratuito")
        PREMIUM = "premium", _("Premium")

    class PlanType(models.TextChoices):
        WEEKLY = "weekly", _("Semanal")
        MONTHLY = "monthly", _("Mensual")
        QUARTERLY = "quarterly", _("Trimestral")

    class VerificationStatus(models.TextChoices):
        NOT_SUBMITTED = "not_submitted", _("Sin enviar")
        PENDING = "pending", _("En revisión")
        VERIFIED = "verified", _("Verificado")
        REJECTED = "rejected", _("Rechazado")

    username = None
    email = models.EmailField(_("Email"), unique=True)
    name = models.CharField(_("Nombre"), max_length=100, validators=[MinLengthValidator(3)])
    phone = models.CharField(
        _("Teléfono"),
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    whatsapp = models.CharField(_("WhatsApp"), max_length=20, blank=True, validators=[PHONE_VALIDATOR])
    user_type = models.CharField(
        _("Tipo de usuario"),
        max_length=20,
        choices=UserType.choices,
        default=UserType.TENANT,
    )
    owner_role = models.CharField(max_length=20, choices=OwnerRole.choices, blank=True)
    id_type = models.CharField(max_length=20, choices=IdType.choices, blank=True)
    id_number = models.CharField(max_length=30, blank=True)
    payment_preference = models.CharField(max_length=20, choices=PaymentPreference.choices, blank=True)

    plan = models.CharField(max_length=10, choices=Plan.choices, default=Plan.FREE)
    plan_type = models.CharField(max_length=10, choices=PlanType.choices, blank=True)
    plan_started_at = models.DateTimeField(null=True, blank=True)
    plan_expires_at = models.DateTimeField(null=True, blank=True)
    premium_since = models.DateTimeField(null=True, blank=True)

    verification_status = models.CharField(
        max_length=20,
        choices=VerificationStatus.choices,
        default=VerificationStatus.NOT_SUBMITTED,
    )
    verification_rejection_reason = models.TextField(blank=True)
    is_verified = models.BooleanField(_("Identidad verificada"), default=False)

    failed_login_attempts = models.PositiveIntegerField(default=0)
    locked_until = models.DateTimeField(_("Bloqueado hasta"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        verbose_name = _("Usuario")
        verbose_name_plural = _("Usuarios")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_user_type_display()})"

    # --- Roles ----------------------------------------------------------------
    def is_owner(self) -> bool:
        return self.user_type == self.UserType.OWNER

    def is_tenant(self) -> bool:
        return self.user_type == self.UserType.TENANT

    def is_super_admin(self) -> bool:
        return self.user_type == self.UserType.SUPER_ADMIN or self.is_superuser

    def is_platform_admin(self) -> bool:
        """Admins and super-admins both moderate listings, payments and documents."""
        return (
            self.user_type in {self.UserType.ADMIN, self.UserType.SUPER_ADMIN}
            or self.is_staff
            or self.is_superuser
        )

    # --- Plan -----------------------------------------------------------------
    @property
    def is_premium(self) -> bool:
        if self.plan != self.Plan.PREMIUM:
            return False
        return self.plan_expires_at is None or self.plan_expires_at > timezone.now()

    def activate_premium(self, plan_type: str, duration_days: int) -> None:
        now = timezone.now()
        self.plan = self.Plan.PREMIUM
        self.plan_type = plan_type
        self.plan_started_at = now
        self.plan_expires_at = now + timedelta(days=duration_days)
        if self.premium_since is None:
            self.premium_since = now
        self.save(
            update_fields=[
                "plan",
                "plan_type",
                "plan_started_at",
                "plan_expires_at",
                "premium_since",
                "updated_at",
            ]
        )

    def downgrade_to_free(self) -> None:
        self.plan = self.Plan.FREE
        self.plan_type = ""
        self.save(update_fields=["plan", "plan_type", "updated_at"])

    # --- Verification ---------------------------------------------------------
    def mark_verification_pending(self) -> None:
        self.verification_status = self.VerificationStatus.PENDING
        self.verification_rejection_reason = ""
        self.save(update_fields=["verification_status", "verification_rejection_reason", "updated_at"])

    def mark_verified(self) -> None:
        self.verification_status = self.VerificationStatus.VERIFIED
        self.verification_rejection_reason = ""
        self.is_verified = True
        self.save(
            update_fields=["verification_status", "verification_rejection_reason", "is_verified", "updated_at"]
        )

    def mark_verification_rejected(self, reason: str) -> None:
        self.verification_status = self.VerificationStatus.REJECTED
        self.verification_rejection_reason = reason
        self.is_verified = False
        self.save(
            update_fields=["verification_status", "verification_rejection_reason", "is_verified", "updated_at"]
        )

    # --- Login protection -----------------------------------------------------
    @property
    def is_locked(self) -> bool:
        return bool(self.locked_until and self.locked_until > timezone.now())

    def lock(self, minutes: int = 15) -> None:
        self.locked_until = timezone.now() + timedelta(minutes=minutes)
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def unlock(self) -> None:
        self.locked_until = None
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def register_failed_attempt(self, threshold: int = 5) -> None:
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= threshold:
            self.lock()
            return
        self.save(update_fields=["failed_login_attempts"])


class PasswordResetToken(models.Model):
    """One-time 6 digit code for password recovery, limited in time and attempts."""

    user = models.ForeignKey(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="password_reset_tokens",
    )
    code = models.CharField(max_length=6)
    expires_at = models.DateTimeField()
    attempts_left = models.PositiveSmallIntegerField(default=3)
    is_used = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Código de recuperación")
        verbose_name_plural = _("Códigos de recuperación")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["code", "expires_at"]),
        ]

    def __str__(self) -> str:
        return f"Reset token for {self.user_id}"

    @property
    def is_expired(self) -> bool:
        return timezone.now() >= self.expires_at

    def mark_used(self) -> None:
        self.is_used = True
        self.save(update_fields=["is_used"])

    def decrement_attempt(self) -> None:
        if self.attempts_left > 0:
            self.attempts_left -= 1
            self.save(update_fields=["attempts_left"])


User = CustomUser
