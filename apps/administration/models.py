"""Back-office models: activity log and system configuration."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class ActivityLog(models.Model):
    """Журнал событий платформы для панели супер-администратора."""

    class Type(models.TextChoices):
        USER_REGISTERED = "user_registered", _("Usuario registrado")
        PROPERTY_SUBMITTED = "property_submitted", _("Inmueble enviado")
        PROPERTY_APPROVED = "property_approved", _("Inmueble aprobado")
        PROPERTY_REJECTED = "property_rejected", _("Inmueble rechazado")
        PROPERTY_DELETED = "property_deleted", _("Inmueble eliminado")
        PAYMENT_SUBMITTED = "payment_submitted", _("Pago enviado")
        PAYMENT_VERIFIED = "payment_verified", _("Pago verificado")
        PAYMENT_REJECTED = "payment_rejected", _("Pago rechazado")
        VERIFICATION_SUBMITTED = "verification_submitted", _("Documentos enviados")
        VERIFICATION_APPROVED = "verification_approved", _("Verificación aprobada")
        VERIFICATION_REJECTED = "verification_rejected", _("Verificación rechazada")
        SUBSCRIPTION_EXPIRED = "subscription_expired", _("Suscripción vencida")
        CONFIG_UPDATED = "config_updated", _("Configuración actualizada")

    type = models.CharField(max_length=40, choices=Type.choices)
    message = models.TextField()
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activity_logs",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activity_logs",
    )
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("Actividad")
        verbose_name_plural = _("Actividades")
        ordering = ["-timestamp"]
        indexes = [models.Index(fields=["type", "timestamp"])]

    def __str__(self) -> str:
        return f"{self.type} @ {self.timestamp:%Y-%m-%d %H:%M}"


class SystemConfig(models.Model):
    """Single-row business configuration edited from the back office."""

    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("10.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text=_("Comisión de la plataforma en porcentaje."),
    )
    featured_property_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("50000"))
    max_images_per_property = models.PositiveSmallIntegerField(default=10)
    min_property_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("100000"))
    max_property_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("20000000"))
    auto_approval_enabled = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Configuración del sistema")
        verbose_name_plural = _("Configuración del sistema")

    def __str__(self) -> str:
        return "System configuration"

    def clean(self) -> None:
        if self.min_property_price > self.max_property_price:
            raise ValidationError({"min_property_price": "El precio mínimo no puede superar el máximo."})

    def save(self, *args, **kwargs):  # type: ignore
        self.pk = 1
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):  # type: ignore
        raise ValidationError("La configuración del sistema no se puede eliminar.")

    @classmethod
    def load(cls) -> "SystemConfig":
        config, _created = cls.objects.get_or_create(pk=1)
        return config
