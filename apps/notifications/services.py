"""Notification services: in-app notifications plus e-mail copies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.db.models import Q  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from .models import Notification

if TYPE_CHECKING:  # pragma: no cover
    from apps.finances.models import PaymentRequest
    from apps.properties.models import Property
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None = None,
    context: dict | None = None,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Send an e-mail; failures are logged and reported as False.

    Args:
        recipient_email: destination address
        subject: e-mail subject
        template_name: optional Django template rendered with ``context``
        context: template context; ``context["message"]`` is the plain body otherwise
        html_message: pre-rendered HTML body

    Returns:
        bool: True when the backend accepted the message
    """
    context = context or {}
    try:
        if html_message:
            text_message = strip_tags(html_message)
        elif template_name:
            html_message = render_to_string(template_name, context)
            text_message = strip_tags(html_message)
        else:
            text_message = context.get("message", "")

        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def notify(
    user: "CustomUser",
    notification_type: str,
    title: str,
    message: str,
    *,
    property: "Property | None" = None,
    interested_user: "CustomUser | None" = None,
    email: bool = True,
) -> Notification:
    """Create an in-app notification and mirror it by e-mail."""
    notification = Notification.objects.create(
        user=user,
        type=notification_type,
        title=title,
        message=message,
        property=property,
        property_title=property.title if property is not None else "",
        interested_user=interested_user,
    )
    logger.info(f"Notification {notification_type} created for user {user.id}")
    if email and user.email:
        send_email_notification(
            recipient_email=user.email,
            subject=f"EstuArriendo: {title}",
            context={"message": message},
        )
    return notification


def platform_admins() -> Iterable["CustomUser"]:
    User = get_user_model()
    return User.objects.filter(is_active=True).filter(
        Q(user_type__in=[User.UserType.ADMIN, User.UserType.SUPER_ADMIN]) | Q(is_staff=True)
    )


def notify_admins(notification_type: str, title: str, message: str, *, property=None) -> list[Notification]:
    # In-app only: the moderation queue is the admins' inbox.
    return [
        notify(admin, notification_type, title, message, property=property, email=False)
        for admin in platform_admins()
    ]


# --- Listings ----------------------------------------------------------------

def notify_property_submitted(property_obj: "Property") -> list[Notification]:
    return notify_admins(
        Notification.Type.PROPERTY_SUBMITTED,
        "Nuevo inmueble para revisar",
        f"{property_obj.owner.name or property_obj.owner.email} publicó \"{property_obj.title}\".",
        property=property_obj,
    )


def notify_property_approved(property_obj: "Property") -> Notification:
    return notify(
        property_obj.owner,
        Notification.Type.PROPERTY_APPROVED,
        "Inmueble aprobado",
        f"Tu inmueble \"{property_obj.title}\" fue aprobado y ya es visible para los estudiantes.",
        property=property_obj,
    )


def notify_property_rejected(property_obj: "Property") -> Notification:
    return notify(
        property_obj.owner,
        Notification.Type.PROPERTY_REJECTED,
        "Inmueble rechazado",
        f"Tu inmueble \"{property_obj.title}\" fue rechazado. Motivo: {property_obj.rejection_reason}",
        property=property_obj,
    )


def notify_property_interest(property_obj: "Property", interested_user: "CustomUser", message: str = "") -> Notification:
    text = f"{interested_user.name or interested_user.email} está interesado en \"{property_obj.title}\"."
    if message:
        text = f"{text} Mensaje: {message}"
    return notify(
        property_obj.owner,
        Notification.Type.PROPERTY_INTEREST,
        "Nuevo interesado",
        text,
        property=property_obj,
        interested_user=interested_user,
    )


# --- Payments ----------------------------------------------------------------

def notify_payment_submitted(payment_request: "PaymentRequest") -> list[Notification]:
    user = payment_request.user
    return notify_admins(
        Notification.Type.PAYMENT_SUBMITTED,
        "Nuevo comprobante de pago",
        f"{user.name or user.email} envió un comprobante por ${payment_request.amount:,.0f} "
        f"({payment_request.get_plan_type_display()}).",
    )


def notify_payment_verified(payment_request: "PaymentRequest") -> Notification:
    user = payment_request.user
    return notify(
        user,
        Notification.Type.PAYMENT_VERIFIED,
        "Pago verificado",
        f"Tu pago fue verificado. Tu plan premium está activo hasta "
        f"{user.plan_expires_at:%d/%m/%Y}.",
    )


def notify_payment_rejected(payment_request: "PaymentRequest") -> Notification:
    message = "Tu comprobante de pago fue rechazado."
    if payment_request.rejection_reason:
        message = f"{message} Motivo: {payment_request.rejection_reason}"
    return notify(
        payment_request.user,
        Notification.Type.PAYMENT_REJECTED,
        "Pago rechazado",
        message,
    )


# --- Identity verification ------------------------------------------------------

def notify_verification_approved(user: "CustomUser") -> Notification:
    return notify(
        user,
        Notification.Type.VERIFICATION_APPROVED,
        "Identidad verificada",
        "Tus documentos fueron aprobados. Tu perfil ahora muestra la insignia de verificado.",
    )


def notify_verification_rejected(user: "CustomUser") -> Notification:
    return notify(
        user,
        Notification.Type.VERIFICATION_REJECTED,
        "Verificación rechazada",
        f"Tus documentos fueron rechazados. Motivo: {user.verification_rejection_reason}",
    )
