"""Payment review and subscription lifecycle."""

from __future__ import annotations

import logging
from typing import Any

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.administration.models import ActivityLog
from apps.administration.services import log_activity
from apps.notifications import services as notifications
from .models import PaymentRequest, Subscription

logger = logging.getLogger(__name__)


class PaymentAlreadyProcessedError(Exception):
    """Raised when a payment request is reviewed a second time."""

    def __init__(self, payment_request: PaymentRequest):
        self.payment_request = payment_request
        super().__init__(
            f"La solicitud de pago ya fue procesada ({payment_request.get_status_display()})."
        )


@transaction.atomic
def submit_payment_request(user, data: dict[str, Any]) -> PaymentRequest:
    payment_request = PaymentRequest.objects.create(user=user, **data)
    log_activity(
        ActivityLog.Type.PAYMENT_SUBMITTED,
        f"Comprobante {payment_request.reference_code} enviado por {user.email}",
        user=user,
    )
    notifications.notify_payment_submitted(payment_request)
    return payment_request


@transaction.atomic
def verify_payment(payment_request: PaymentRequest, reviewer) -> Subscription:
    """
    Approve a pending payment proof.

    Upgrades the user to premium for ``plan_duration`` days, closes any
    previous active subscription and records the new one.
    """
    payment_request = PaymentRequest.objects.select_for_update().get(pk=payment_request.pk)
    if not payment_request.is_pending:
        raise PaymentAlreadyProcessedError(payment_request)

    payment_request.mark_verified()
    user = payment_request.user
    user.activate_premium(payment_request.plan_type, payment_request.plan_duration)

    Subscription.objects.filter(user=user, status=Subscription.Status.ACTIVE).update(
        status=Subscription.Status.CANCELLED
    )
    subscription = Subscription.objects.create(
        user=user,
        plan=user.plan,
        plan_type=payment_request.plan_type,
        started_at=user.plan_started_at,
        expires_at=user.plan_expires_at,
        payment_request=payment_request,
    )

    log_activity(
        ActivityLog.Type.PAYMENT_VERIFIED,
        f"Pago {payment_request.reference_code} verificado para {user.email}",
        user=reviewer,
    )
    notifications.notify_payment_verified(payment_request)
    logger.info(f"Payment request {payment_request.id} verified by {reviewer.id}")
    return subscription


@transaction.atomic
def reject_payment(payment_request: PaymentRequest, reviewer, reason: str = "") -> PaymentRequest:
    payment_request = PaymentRequest.objects.select_for_update().get(pk=payment_request.pk)
    if not payment_request.is_pending:
        raise PaymentAlreadyProcessedError(payment_request)

    payment_request.mark_rejected(reason)
    log_activity(
        ActivityLog.Type.PAYMENT_REJECTED,
        f"Pago {payment_request.reference_code} rechazado. Motivo: {reason or '-'}",
        user=reviewer,
    )
    notifications.notify_payment_rejected(payment_request)
    logger.info(f"Payment request {payment_request.id} rejected by {reviewer.id}")
    return payment_request


def active_subscription(user) -> Subscription | None:
    return (
        Subscription.objects.filter(
            user=user, status=Subscription.Status.ACTIVE, expires_at__gt=timezone.now()
        )
        .order_by("-expires_at")
        .first()
    )


def expire_subscriptions(now=None) -> int:
    """Close overdue subscriptions and downgrade their users to the free plan."""
    now = now or timezone.now()
    expired = 0
    overdue = Subscription.objects.select_related("user").filter(
        status=Subscription.Status.ACTIVE, expires_at__lte=now
    )
    for subscription in overdue:
        with transaction.atomic():
            subscription.status = Subscription.Status.EXPIRED
            subscription.save(update_fields=["status"])
            user = subscription.user
            still_active = Subscription.objects.filter(
                user=user, status=Subscription.Status.ACTIVE, expires_at__gt=now
            ).exists()
            if not still_active:
                user.downgrade_to_free()
            log_activity(
                ActivityLog.Type.SUBSCRIPTION_EXPIRED,
                f"Suscripción {subscription.plan_type} de {user.email} vencida",
                user=user,
            )
        expired += 1
    if expired:
        logger.info(f"Expired {expired} subscriptions")
    return expired
