# app/core/celery.py
from celery import Celery
from celery.schedules import crontab

from app.core.config import settings

celery_app = Celery(
    "social_tasks",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.REDIS_URL,
    include=[
        "app.tasks.cleanup",
        "app.tasks.presence",
    ],
)


def init_celery():
    celery_app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        broker_connection_retry_on_startup=True,
        task_track_started=True,
    )


celery_app.conf.beat_schedule = {
    "cleanup-read-notifications": {
        "task": "app.tasks.cleanup.cleanup_read_notifications_task",
        "schedule": crontab(hour=3, minute=0),
    },
    "reset-stale-presence": {
        "task": "app.tasks.presence.reset_stale_presence_task",
        "schedule": crontab(minute="*/10"),
    },
}
