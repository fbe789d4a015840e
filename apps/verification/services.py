"""Identity verification workflow: not_submitted -> pending -> verified | rejected."""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.administration.models import ActivityLog
from apps.administration.services import log_activity
from apps.notifications import services as notifications
from .models import VerificationDocuments

logger = logging.getLogger(__name__)


class VerificationDocumentsMissingError(Exception):
    """The user never submitted documents, so there is nothing to review."""


class AlreadyVerifiedError(Exception):
    pass


def get_documents(user) -> VerificationDocuments:
    try:
        return user.verification_documents
    except VerificationDocuments.DoesNotExist as exc:
        raise VerificationDocumentsMissingError(
            "El usuario no ha enviado documentos de verificación."
        ) from exc


@transaction.atomic
def submit_documents(user, data: dict[str, Any]) -> VerificationDocuments:
    """Store (or replace) the user's documents and put them in the review queue."""
    if user.verification_status == user.VerificationStatus.VERIFIED:
        raise AlreadyVerifiedError("Tu identidad ya está verificada.")

    documents, created = VerificationDocuments.objects.update_or_create(
        user=user,
        defaults={
            "id_front": data["id_front"],
            "id_back": data["id_back"],
            "selfie": data["selfie"],
            "utility_bill": data.get("utility_bill", ""),
            "processed_at": None,
        },
    )
    if not created:
        # Re-submission restarts the queue position.
        documents.submitted_at = timezone.now()
        documents.save(update_fields=["submitted_at"])

    user.mark_verification_pending()
    log_activity(
        ActivityLog.Type.VERIFICATION_SUBMITTED,
        f"Documentos de verificación enviados por {user.email}",
        user=user,
    )
    logger.info(f"Verification documents submitted by user {user.id}")
    return documents


@transaction.atomic
def approve(user, reviewer) -> None:
    documents = get_documents(user)
    documents.processed_at = timezone.now()
    documents.save(update_fields=["processed_at"])
    user.mark_verified()
    log_activity(
        ActivityLog.Type.VERIFICATION_APPROVED,
        f"Identidad de {user.email} verificada",
        user=reviewer,
    )
    notifications.notify_verification_approved(user)
    logger.info(f"User {user.id} verified by {reviewer.id}")


@transaction.atomic
def reject(user, reviewer, reason: str) -> None:
    documents = get_documents(user)
    documents.processed_at = timezone.now()
    documents.save(update_fields=["processed_at"])
    user.mark_verification_rejected(reason)
    log_activity(
        ActivityLog.Type.VERIFICATION_REJECTED,
        f"Verificación de {user.email} rechazada. Motivo: {reason}",
        user=reviewer,
    )
    notifications.notify_verification_rejected(user)
    logger.info(f"User {user.id} verification rejected by {reviewer.id}")
