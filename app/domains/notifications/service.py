# app/domains/notifications/service.py
from typing import List, Optional, Tuple

from app.core.event_bus import event_bus
from app.domains.auth.repository import get_users_by_ids
from app.shared.exceptions import BadRequestError, NotFoundError
from app.shared.utils.logger import get_logger
from . import repository
from .schemas import NotificationType, serialize_notification

logger = get_logger(__name__)


class NotificationService:
    async def notify(
        self,
        recipient_id: str,
        sender_id: str,
        type: NotificationType,
        message: str,
        related_post_id: Optional[str] = None,
        related_comment_id: Optional[str] = None,
        related_group_id: Optional[str] = None,
    ) -> Optional[dict]:
        """Persist a notification and push it to the recipient's open sockets.

        Users are never notified about their own actions.
        """
        if recipient_id == sender_id:
            return None

        notification = await repository.create_notification(
            {
                "recipient_id": recipient_id,
                "sender_id": sender_id,
                "type": NotificationType(type).value,
                "message": message,
                "related_post_id": related_post_id,
                "related_comment_id": related_comment_id,
                "related_group_id": related_group_id,
            }
        )
        users = await get_users_by_ids([sender_id])
        data = serialize_notification(notification, users)

        await event_bus.publish(
            "notification:created",
            {"recipient_id": recipient_id, "notification": data},
        )
        logger.debug(f"Notification {notification.type} -> {recipient_id}")
        return data

    async def get_notifications(
        self, user_id: str, is_read: Optional[bool], limit: int, offset: int
    ) -> Tuple[List[dict], int]:
        notifications, total = await repository.list_notifications(user_id, is_read, limit, offset)
        users = await get_users_by_ids(n.sender_id for n in notifications)
        return [serialize_notification(n, users) for n in notifications], total

    async def unread_count(self, user_id: str) -> int:
        return await repository.count_unread(user_id)

    async def mark_read(
        self, user_id: str, notification_ids: Optional[List[str]], mark_all: bool
    ) -> int:
        if mark_all:
            return await repository.mark_read(user_id)
        if not notification_ids:
            raise BadRequestError("Provide notificationIds or markAll")
        return await repository.mark_read(user_id, notification_ids)

    async def delete(self, user_id: str, notification_id: str):
        if not await repository.delete_notification(notification_id, user_id):
            raise NotFoundError("Notification not found")


notification_service = NotificationService()
