# app/domains/notifications/schemas.py
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from app.domains.auth.schemas import UserSummary
from app.shared.schemas.base import CamelModel


class NotificationType(str, Enum):
    LIKE = "like"
    COMMENT = "comment"
    FRIEND_REQUEST = "friend_request"
    FRIEND_ACCEPT = "friend_accept"
    MESSAGE = "message"
    GROUP_INVITE = "group_invite"
    POST_SHARE = "post_share"


class MarkReadRequest(CamelModel):
    notification_ids: Optional[List[str]] = None
    mark_all: bool = False


class NotificationOut(CamelModel):
    id: str
    recipient: str
    sender: Optional[UserSummary] = None
    type: NotificationType
    message: str
    related_post: Optional[str] = None
    related_comment: Optional[str] = None
    related_group: Optional[str] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


def serialize_notification(notification, users: Dict) -> dict:
    sender = users.get(notification.sender_id)
    return NotificationOut(
        id=notification.id,
        recipient=notification.recipient_id,
        sender=UserSummary.model_validate(sender) if sender else None,
        type=notification.type,
        message=notification.message,
        related_post=notification.related_post_id,
        related_comment=notification.related_comment_id,
        related_group=notification.related_group_id,
        is_read=bool(notification.is_read),
        read_at=notification.read_at,
        created_at=notification.created_at,
    ).dump()
