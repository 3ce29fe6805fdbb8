# app/domains/notifications/repository.py
import uuid
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, func, select, update

from app.core.database import get_db
from app.shared.utils.logger import get_logger
from .models import Notification

logger = get_logger(__name__)


async def create_notification(values: Dict) -> Notification:
    async with get_db() as db:
        notification = Notification(id=str(uuid.uuid4()), is_read=False, **values)
        db.add(notification)
        await db.flush()
        return notification


async def get_notification(notification_id: str) -> Optional[Notification]:
    async with get_db() as db:
        result = await db.execute(select(Notification).filter(Notification.id == notification_id))
        return result.scalar_one_or_none()


async def list_notifications(
    recipient_id: str, is_read: Optional[bool], limit: int, offset: int = 0
) -> Tuple[List[Notification], int]:
    async with get_db() as db:
        query = select(Notification).filter(Notification.recipient_id == recipient_id)
        if is_read is not None:
            query = query.filter(Notification.is_read.is_(is_read))
        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(
            query.order_by(Notification.created_at.desc()).limit(limit).offset(offset)
        )
        return list(result.scalars().all()), total


async def count_unread(recipient_id: str) -> int:
    async with get_db() as db:
        result = await db.execute(
            select(func.count())
            .select_from(Notification)
            .filter(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
        )
        return result.scalar_one()


async def mark_read(recipient_id: str, notification_ids: Optional[Iterable[str]] = None) -> int:
    """Mark the recipient's unread notifications read; all of them when ids is None."""
    now = datetime.utcnow()
    async with get_db() as db:
        stmt = update(Notification).where(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        )
        if notification_ids is not None:
            ids = list(notification_ids)
            if not ids:
                return 0
            stmt = stmt.where(Notification.id.in_(ids))
        result = await db.execute(stmt.values(is_read=True, read_at=now, updated_at=now))
        return result.rowcount or 0


async def delete_notification(notification_id: str, recipient_id: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            delete(Notification).where(
                Notification.id == notification_id,
                Notification.recipient_id == recipient_id,
            )
        )
        return result.rowcount > 0


async def delete_read_older_than(days: int) -> int:
    cutoff = datetime.utcnow() - timedelta(days=days)
    async with get_db() as db:
        result = await db.execute(
            delete(Notification).where(
                Notification.is_read.is_(True),
                Notification.created_at < cutoff,
            )
        )
        return result.rowcount or 0
