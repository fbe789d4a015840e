"""Celery tasks for the back office."""

from __future__ import annotations

from celery import shared_task  # type: ignore

from .services import purge_activity_logs


@shared_task(name="administration.purge_activity_logs")
def purge_activity_logs_task(days: int = 90) -> dict[str, int]:
    """Nightly cleanup of the activity feed (see ``CELERY_BEAT_SCHEDULE``)."""
    return {"deleted": purge_activity_logs(days)}
