# app/domains/messages/repository.py
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, case, delete, desc, func, or_, select, update

from app.core.database import get_db
from .models import Message


def _between(a: str, b: str):
    return or_(
        and_(Message.sender_id == a, Message.receiver_id == b),
        and_(Message.sender_id == b, Message.receiver_id == a),
    )


async def create_message(values: Dict) -> Message:
    async with get_db() as db:
        message = Message(id=str(uuid.uuid4()), is_read=False, is_edited=False, **values)
        db.add(message)
        await db.flush()
        return message


async def get_message(message_id: str) -> Optional[Message]:
    async with get_db() as db:
        result = await db.execute(select(Message).filter(Message.id == message_id))
        return result.scalar_one_or_none()


async def get_conversation(
    user_id: str, peer_id: str, limit: int, offset: int = 0
) -> Tuple[List[Message], int]:
    """One page of a conversation in chronological order; page 1 holds the newest messages."""
    async with get_db() as db:
        condition = _between(user_id, peer_id)
        total = (
            await db.execute(select(func.count()).select_from(Message).filter(condition))
        ).scalar_one()
        result = await db.execute(
            select(Message)
            .filter(condition)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
            .offset(offset)
        )
        messages = list(result.scalars().all())
        messages.reverse()
        return messages, total


async def list_conversations(
    user_id: str, limit: int, offset: int = 0
) -> Tuple[List[Tuple[str, Message]], int]:
    """Peers ordered by latest activity, each with its last message."""
    peer = case((Message.sender_id == user_id, Message.receiver_id), else_=Message.sender_id)
    involved = or_(Message.sender_id == user_id, Message.receiver_id == user_id)
    async with get_db() as db:
        latest = (
            select(peer.label("peer_id"), func.max(Message.created_at).label("last_at"))
            .filter(involved)
            .group_by(peer)
        )
        total = (await db.execute(select(func.count()).select_from(latest.subquery()))).scalar_one()
        rows = await db.execute(latest.order_by(desc("last_at")).limit(limit).offset(offset))

        conversations = []
        for peer_id, _ in rows.all():
            last = await db.execute(
                select(Message)
                .filter(_between(user_id, peer_id))
                .order_by(Message.created_at.desc(), Message.id.desc())
                .limit(1)
            )
            conversations.append((peer_id, last.scalar_one()))
        return conversations, total


async def count_unread_by_sender(receiver_id: str, sender_ids: List[str]) -> Dict[str, int]:
    if not sender_ids:
        return {}
    async with get_db() as db:
        result = await db.execute(
            select(Message.sender_id, func.count())
            .filter(
                Message.receiver_id == receiver_id,
                Message.sender_id.in_(sender_ids),
                Message.is_read.is_(False),
            )
            .group_by(Message.sender_id)
        )
        return {sender_id: count for sender_id, count in result.all()}


async def mark_conversation_read(receiver_id: str, sender_id: str) -> int:
    now = datetime.utcnow()
    async with get_db() as db:
        result = await db.execute(
            update(Message)
            .where(
                Message.receiver_id == receiver_id,
                Message.sender_id == sender_id,
                Message.is_read.is_(False),
            )
            .values(is_read=True, read_at=now)
        )
        return result.rowcount or 0


async def update_message(message_id: str, content: str) -> Optional[Message]:
    now = datetime.utcnow()
    async with get_db() as db:
        await db.execute(
            update(Message)
            .where(Message.id == message_id)
            .values(content=content, is_edited=True, edited_at=now, updated_at=now)
        )
        result = await db.execute(select(Message).filter(Message.id == message_id))
        return result.scalar_one_or_none()


async def delete_message(message_id: str) -> bool:
    async with get_db() as db:
        await db.execute(
            update(Message).where(Message.reply_to_id == message_id).values(reply_to_id=None)
        )
        result = await db.execute(delete(Message).where(Message.id == message_id))
        return result.rowcount > 0
