from asgiref.sync import async_to_sync

from app.core.celery import celery_app
from app.core.config import settings
from app.domains.notifications import repository
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


@celery_app.task
def cleanup_read_notifications_task(days: int = None):
    days = days or settings.NOTIFICATION_RETENTION_DAYS
    removed = async_to_sync(repository.delete_read_older_than)(days)
    logger.info(f"Removed {removed} read notifications older than {days} days")
    return removed
