# app/domains/messages/schemas.py
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import Field

from app.domains.auth.schemas import UserSummary
from app.shared.schemas.base import CamelModel


class MessageType(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class SendMessageRequest(CamelModel):
    content: Optional[str] = Field(default=None, max_length=1000)
    type: MessageType = MessageType.TEXT
    image: Optional[str] = None
    reply_to: Optional[str] = None


class EditMessageRequest(CamelModel):
    content: str = Field(min_length=1, max_length=1000)


class MessageOut(CamelModel):
    id: str
    sender: Optional[UserSummary] = None
    receiver: Optional[UserSummary] = None
    content: Optional[str] = None
    type: MessageType = MessageType.TEXT
    image: Optional[str] = None
    reply_to: Optional[str] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


def serialize_message(message, users: Dict) -> dict:
    sender = users.get(message.sender_id)
    receiver = users.get(message.receiver_id)
    return MessageOut(
        id=message.id,
        sender=UserSummary.model_validate(sender) if sender else None,
        receiver=UserSummary.model_validate(receiver) if receiver else None,
        content=message.content,
        type=message.type,
        image=message.image,
        reply_to=message.reply_to_id,
        is_read=bool(message.is_read),
        read_at=message.read_at,
        is_edited=bool(message.is_edited),
        edited_at=message.edited_at,
        created_at=message.created_at,
    ).dump()
