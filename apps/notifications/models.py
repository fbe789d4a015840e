"""Notification model.

In-app messages shown in the notification bell. Domain services create
them when a listing is reviewed, someone is interested in a listing, a
payment proof is processed or identity documents are reviewed.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Notification(models.Model):
    """A message sent to a user about some event."""

    class Type(models.TextChoices):
        PROPERTY_INTEREST = "property_interest", _("Interés en inmueble")
        PROPERTY_SUBMITTED = "property_submitted", _("Inmueble enviado")
        PROPERTY_APPROVED = "property_approved", _("Inmueble aprobado")
        PROPERTY_REJECTED = "property_rejected", _("Inmueble rechazado")
        PAYMENT_SUBMITTED = "payment_submitted", _("Pago enviado")
        PAYMENT_VERIFIED = "payment_verified", _("Pago verificado")
        PAYMENT_REJECTED = "payment_rejected", _("Pago rechazado")
        VERIFICATION_APPROVED = "verification_approved", _("Verificación aprobada")
        VERIFICATION_REJECTED = "verification_rejected", _("Verificación rechazada")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications'
    )
    type = models.CharField(max_length=40, choices=Type.choices)
    title = models.CharField(max_length=255)
    message = models.TextField()
    property = models.ForeignKey(
        'properties.Property',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications',
    )
    # Kept so the text survives deletion of the listing.
    property_title = models.CharField(max_length=255, blank=True)
    interested_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [models.Index(fields=['user', 'is_read'])]

    def __str__(self) -> str:
        return f"Notification to {self.user_id}: {self.title}"
