"""Housing requests published by students for owners to answer."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class StudentRequest(models.Model):
    """Solicitud de alojamiento de un estudiante."""

    class Status(models.TextChoices):
        OPEN = "open", _("Abierta")
        CLOSED = "closed", _("Cerrada")

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="student_requests",
    )
    student_name = models.CharField(max_length=150)
    student_email = models.EmailField()
    student_phone = models.CharField(max_length=20)
    student_whatsapp = models.CharField(max_length=20, blank=True)

    city = models.ForeignKey("locations.City", on_delete=models.PROTECT, related_name="student_requests")
    institution = models.ForeignKey(
        "locations.Institution",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="student_requests",
    )
    university_target = models.CharField(
        max_length=200, blank=True, help_text=_("Institución escrita a mano si no está en el catálogo.")
    )

    budget_max = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("1"))]
    )
    property_type_desired = models.ForeignKey(
        "properties.PropertyType", on_delete=models.PROTECT, related_name="student_requests"
    )
    required_amenities = models.JSONField(default=list, blank=True)
    deal_breakers = models.JSONField(default=list, blank=True)
    move_in_date = models.DateField()
    contract_duration = models.PositiveSmallIntegerField(null=True, blank=True, help_text=_("Meses"))
    additional_notes = models.TextField(blank=True)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.OPEN)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Solicitud de estudiante")
        verbose_name_plural = _("Solicitudes de estudiantes")
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["status", "city"])]

    def __str__(self) -> str:
        return f"{self.student_name} - {self.city_id} ({self.status})"

    def close(self) -> None:
        self.status = self.Status.CLOSED
        self.save(update_fields=["status", "updated_at"])
