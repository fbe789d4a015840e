"""Payment request and subscription models for EstuArriendo."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.users.models import CustomUser


class PaymentRequest(models.Model):
    """Comprobante de pago subido por el usuario, revisado a mano por un administrador."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pendiente")
        VERIFIED = "verified", _("Verificado")
        REJECTED = "rejected", _("Rechazado")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="payment_requests",
    )
    amount = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("1"))]
    )
    plan_type = models.CharField(max_length=20, choices=CustomUser.PlanType.choices)
    plan_duration = models.PositiveSmallIntegerField(help_text=_("Duración del plan en días"))
    reference_code = models.CharField(max_length=100)
    proof_image_url = models.URLField(max_length=500)
    proof_image_public_id = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    rejection_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Solicitud de pago")
        verbose_name_plural = _("Solicitudes de pago")
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["status", "created_at"])]

    def __str__(self) -> str:
        return f"PaymentRequest {self.reference_code} ({self.status})"

    @property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING

    def mark_verified(self) -> None:
        self.status = self.Status.VERIFIED
        self.processed_at = timezone.now()
        self.save(update_fields=["status", "processed_at"])

    def mark_rejected(self, reason: str = "") -> None:
        self.status = self.Status.REJECTED
        self.rejection_reason = reason
        self.processed_at = timezone.now()
        self.save(update_fields=["status", "rejection_reason", "processed_at"])


class Subscription(models.Model):
    """Periodo premium concedido por un pago verificado."""

    class Status(models.TextChoices):
        ACTIVE = "active", _("Activa")
        EXPIRED = "expired", _("Vencida")
        CANCELLED = "cancelled", _("Cancelada")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="subscriptions",
    )
    plan = models.CharField(max_length=20, choices=CustomUser.Plan.choices, default=CustomUser.Plan.PREMIUM)
    plan_type = models.CharField(max_length=20, choices=CustomUser.PlanType.choices)
    started_at = models.DateTimeField()
    expires_at = models.DateTimeField()
    payment_request = models.OneToOneField(
        PaymentRequest,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="subscription",
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Suscripción")
        verbose_name_plural = _("Suscripciones")
        ordering = ["-started_at"]
        indexes = [models.Index(fields=["status", "expires_at"])]

    def __str__(self) -> str:
        return f"{self.user_id} {self.plan_type} -> {self.expires_at:%Y-%m-%d}"

    @property
    def days_remaining(self) -> int:
        if self.status != self.Status.ACTIVE:
            return 0
        return max((self.expires_at - timezone.now()).days, 0)
