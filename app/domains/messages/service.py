# app/domains/messages/service.py
from typing import List, Optional, Tuple

from app.core.event_bus import event_bus
from app.domains.auth import repository as users_repository
from app.domains.auth.models import User
from app.domains.auth.schemas import user_summary
from app.domains.friends import repository as friends_repository
from app.domains.notifications.schemas import NotificationType
from app.domains.notifications.service import notification_service
from app.shared.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.shared.utils.logger import get_logger
from . import repository
from .schemas import MessageType, SendMessageRequest, serialize_message

logger = get_logger(__name__)


class MessageService:
    async def _peer(self, user: User, peer_id: str) -> User:
        if peer_id == user.id:
            raise BadRequestError("You cannot message yourself")
        peer = await users_repository.get_user_by_id(peer_id)
        if not peer or not peer.is_active:
            raise NotFoundError("User not found")
        return peer

    async def send_message(self, user: User, receiver_id: str, request: SendMessageRequest) -> dict:
        receiver = await self._peer(user, receiver_id)
        if await friends_repository.is_blocked_between(user.id, receiver_id):
            raise ForbiddenError("You cannot message this user")

        content = (request.content or "").strip()
        if not content and not request.image:
            raise BadRequestError("Message must have content or an image")

        if request.reply_to:
            original = await repository.get_message(request.reply_to)
            if not original or {original.sender_id, original.receiver_id} != {user.id, receiver_id}:
                raise NotFoundError("Message to reply to not found")

        message_type = request.type
        if request.image and not content:
            message_type = MessageType.IMAGE

        message = await repository.create_message(
            {
                "sender_id": user.id,
                "receiver_id": receiver_id,
                "content": content or None,
                "type": message_type.value,
                "image": request.image,
                "reply_to_id": request.reply_to,
            }
        )
        data = serialize_message(message, {user.id: user, receiver.id: receiver})

        await event_bus.publish(
            "message:sent",
            {"sender_id": user.id, "receiver_id": receiver_id, "message": data},
        )
        await notification_service.notify(
            receiver_id,
            user.id,
            NotificationType.MESSAGE,
            f"{user.name} sent you a message",
        )
        logger.info(f"Message {message.id}: {user.id} -> {receiver_id}")
        return data

    async def conversations(self, user: User, limit: int, offset: int) -> Tuple[List[dict], int]:
        rows, total = await repository.list_conversations(user.id, limit, offset)
        peer_ids = [peer_id for peer_id, _ in rows]
        users = await users_repository.get_users_by_ids(peer_ids + [user.id])
        unread = await repository.count_unread_by_sender(user.id, peer_ids)

        conversations = []
        for peer_id, last in rows:
            peer = users.get(peer_id)
            if not peer:
                continue
            conversations.append(
                {
                    "user": user_summary(peer),
                    "lastMessage": serialize_message(last, users),
                    "unreadCount": unread.get(peer_id, 0),
                }
            )
        return conversations, total

    async def get_messages(
        self, user: User, peer_id: str, limit: int, offset: int
    ) -> Tuple[List[dict], int]:
        peer = await self._peer(user, peer_id)
        messages, total = await repository.get_conversation(user.id, peer_id, limit, offset)
        users = {user.id: user, peer.id: peer}
        return [serialize_message(m, users) for m in messages], total

    async def mark_read(self, user: User, peer_id: str) -> int:
        """Mark every incoming message from peer as read."""
        await self._peer(user, peer_id)
        return await repository.mark_conversation_read(user.id, peer_id)

    async def edit_message(self, user: User, message_id: str, content: str) -> dict:
        message = await repository.get_message(message_id)
        if not message:
            raise NotFoundError("Message not found")
        if message.sender_id != user.id:
            raise ForbiddenError("You can only edit your own messages")
        content = (content or "").strip()
        if not content and not message.image:
            raise BadRequestError("Message must have content or an image")
        message = await repository.update_message(message_id, content or None)
        users = await users_repository.get_users_by_ids([message.sender_id, message.receiver_id])
        return serialize_message(message, users)

    async def delete_message(self, user: User, message_id: str):
        message = await repository.get_message(message_id)
        if not message:
            raise NotFoundError("Message not found")
        if message.sender_id != user.id:
            raise ForbiddenError("You can only delete your own messages")
        await repository.delete_message(message_id)


message_service = MessageService()
