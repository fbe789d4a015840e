"""Celery tasks for the finance domain."""

from __future__ import annotations

from celery import shared_task  # type: ignore

from .services import expire_subscriptions


# ============================================================================
# PERIODIC TASKS (Celery Beat)
# ============================================================================

@shared_task(name="finances.expire_subscriptions")
def expire_subscriptions_task() -> dict[str, int]:
    """
    Vence las suscripciones premium cuyo ``expires_at`` ya pasó.

    Runs hourly from ``CELERY_BEAT_SCHEDULE``.

    Returns:
        dict: {"expired": number of subscriptions closed}
    """
    expired = expire_subscriptions()
    return {"expired": expired}
