"""Back-office services used by the other apps."""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model  # type: ignore
from django.db.models import Count, Q, Sum  # type: ignore
from django.utils import timezone  # type: ignore

from .models import ActivityLog, SystemConfig

logger = logging.getLogger(__name__)


def log_activity(activity_type: str, message: str, *, user=None, property=None) -> ActivityLog:
    """Append an entry to the back-office activity feed."""
    entry = ActivityLog.objects.create(type=activity_type, message=message, user=user, property=property)
    logger.info(f"[activity] {activity_type}: {message}")
    return entry


def get_system_config() -> SystemConfig:
    return SystemConfig.load()


def purge_activity_logs(days: int) -> int:
    """Delete log entries older than ``days`` days and return how many were removed."""
    cutoff = timezone.now() - timedelta(days=days)
    deleted, _ = ActivityLog.objects.filter(timestamp__lt=cutoff).delete()
    logger.info(f"Purged {deleted} activity log entries older than {days} days")
    return deleted


def activity_statistics() -> dict:
    """Counts per activity type, overall and for the last 7 days."""
    week_ago = timezone.now() - timedelta(days=7)
    rows = ActivityLog.objects.values("type").annotate(
        total=Count("id"),
        last_7_days=Count("id", filter=Q(timestamp__gte=week_ago)),
    )
    by_type = {row["type"]: {"total": row["total"], "last_7_days": row["last_7_days"]} for row in rows}
    return {"total": ActivityLog.objects.count(), "by_type": by_type}


def dashboard_statistics() -> dict:
    """Aggregates for the super-admin dashboard."""
    from apps.finances.models import PaymentRequest
    from apps.properties.models import Property

    User = get_user_model()

    users = User.objects.aggregate(
        total=Count("id"),
        tenants=Count("id", filter=Q(user_type=User.UserType.TENANT)),
        owners=Count("id", filter=Q(user_type=User.UserType.OWNER)),
        admins=Count("id", filter=Q(user_type__in=[User.UserType.ADMIN, User.UserType.SUPER_ADMIN])),
        premium=Count("id", filter=Q(plan=User.Plan.PREMIUM)),
        verified=Count("id", filter=Q(is_verified=True)),
        pending_verification=Count("id", filter=Q(verification_status=User.VerificationStatus.PENDING)),
    )
    properties = Property.objects.aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status=Property.Status.PENDING)),
        approved=Count("id", filter=Q(status=Property.Status.APPROVED)),
        rejected=Count("id", filter=Q(status=Property.Status.REJECTED)),
        featured=Count("id", filter=Q(is_featured=True)),
        rented=Count("id", filter=Q(is_rented=True)),
        views=Sum("views_count"),
        interests=Sum("interests_count"),
    )
    properties["views"] = properties["views"] or 0
    properties["interests"] = properties["interests"] or 0

    payments = PaymentRequest.objects.aggregate(
        pending=Count("id", filter=Q(status=PaymentRequest.Status.PENDING)),
        verified=Count("id", filter=Q(status=PaymentRequest.Status.VERIFIED)),
        rejected=Count("id", filter=Q(status=PaymentRequest.Status.REJECTED)),
        revenue=Sum("amount", filter=Q(status=PaymentRequest.Status.VERIFIED)),
    )
    payments["revenue"] = payments["revenue"] or Decimal("0")

    return {"users": users, "properties": properties, "payments": payments}
