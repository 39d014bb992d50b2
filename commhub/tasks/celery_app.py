"""Celery worker and beat configuration for report digests."""

from celery import Celery
from celery.schedules import crontab

from ..config import settings

DIGEST_TASK = "commhub.tasks.report_tasks.send_weekly_digests"

BEAT_SCHEDULE = {
    "send-weekly-digests": {
        "task": DIGEST_TASK,
        "schedule": crontab(minute="0", hour="8", day_of_week="mon"),  # Mondays 08:00
    },
}

celery_app = Celery(
    "commhub",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["commhub.tasks.report_tasks"],
)

celery_app.conf.update(
    timezone=settings.celery_timezone,
    enable_utc=True,
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    # A digest run builds one report per agent/admin
    task_time_limit=900,
    task_soft_time_limit=840,
    result_expires=7 * 24 * 3600,
    worker_prefetch_multiplier=1,
    broker_connection_retry_on_startup=True,
    beat_schedule=BEAT_SCHEDULE,
)
