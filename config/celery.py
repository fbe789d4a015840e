"""Celery application for background and periodic jobs.

The beat schedule itself lives in ``CELERY_BEAT_SCHEDULE`` inside the
settings so environments can tune it without touching this module.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("estuarriendo")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
