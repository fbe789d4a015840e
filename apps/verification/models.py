"""Identity verification documents."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.fields import EncryptedTextField


class VerificationDocuments(models.Model):
    """
    Documentos de identidad enviados por un usuario.

    ID card photos and the selfie are Cloudinary URLs stored encrypted;
    the utility bill (proof of address) is only required for owners.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="verification_documents",
    )
    id_front = EncryptedTextField(_("Documento (frente)"), max_length=500)
    id_back = EncryptedTextField(_("Documento (reverso)"), max_length=500)
    selfie = EncryptedTextField(_("Selfie con documento"), max_length=500)
    utility_bill = models.URLField(_("Recibo de servicio público"), max_length=500, blank=True)
    submitted_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = _("Documentos de verificación")
        verbose_name_plural = _("Documentos de verificación")
        ordering = ["submitted_at"]

    def __str__(self) -> str:
        return f"Verification documents of {self.user_id}"
