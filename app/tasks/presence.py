from asgiref.sync import async_to_sync

from app.core.celery import celery_app
from app.core.config import settings
from app.domains.auth import repository
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


@celery_app.task
def reset_stale_presence_task(minutes: int = None):
    """Mark users offline whose presence was not refreshed by any worker heartbeat."""
    minutes = minutes or settings.PRESENCE_STALE_MINUTES
    reset = async_to_sync(repository.reset_stale_presence)(minutes)
    if reset:
        logger.info(f"Reset presence for {reset} stale users")
    return reset
