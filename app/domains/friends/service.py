# app/domains/friends/service.py
"""
Friendship lifecycle: requests, acceptance, removal and blocking.

States between two users are none, request-sent, request-received and
friends. Acceptance is exactly-once: the repository moves the request out of
``pending`` with a conditional update, so a replayed accept finds nothing.
"""
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from app.domains.auth import repository as users_repository
from app.domains.auth.models import User
from app.domains.auth.schemas import user_summary
from app.domains.notifications.schemas import NotificationType
from app.domains.notifications.service import notification_service
from app.shared.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.shared.utils.logger import get_logger
from . import repository
from .schemas import FriendSuggestion, serialize_request

logger = get_logger(__name__)


class FriendService:
    async def send_request(self, sender: User, receiver_id: str, message: Optional[str]) -> dict:
        if sender.id == receiver_id:
            raise BadRequestError("You cannot send a friend request to yourself")

        receiver = await users_repository.get_user_by_id(receiver_id)
        if not receiver or not receiver.is_active:
            raise NotFoundError("User not found")
        if await repository.is_blocked_between(sender.id, receiver_id):
            raise ForbiddenError("You cannot send a friend request to this user")
        if await repository.are_friends(sender.id, receiver_id):
            raise ConflictError("You are already friends")
        if await repository.get_pending_between(sender.id, receiver_id):
            raise ConflictError("A friend request is already pending between you")

        try:
            request = await repository.create_request(sender.id, receiver_id, message)
        except IntegrityError:
            raise ConflictError("A friend request is already pending between you")

        logger.info(f"Friend request {request.id}: {sender.id} -> {receiver_id}")
        await notification_service.notify(
            receiver_id,
            sender.id,
            NotificationType.FRIEND_REQUEST,
            f"{sender.name} sent you a friend request",
        )
        return serialize_request(request, {sender.id: sender, receiver.id: receiver})

    async def accept_request(self, user: User, request_id: str) -> dict:
        request = await repository.accept_request(request_id, user.id)
        if not request:
            raise NotFoundError("Friend request not found or already handled")

        logger.info(f"Friend request {request_id} accepted by {user.id}")
        await notification_service.notify(
            request.sender_id,
            user.id,
            NotificationType.FRIEND_ACCEPT,
            f"{user.name} accepted your friend request",
        )
        users = await users_repository.get_users_by_ids([request.sender_id, request.receiver_id])
        return serialize_request(request, users)

    async def reject_request(self, user: User, request_id: str) -> dict:
        request = await repository.reject_request(request_id, user.id)
        if not request:
            raise NotFoundError("Friend request not found or already handled")
        users = await users_repository.get_users_by_ids([request.sender_id, request.receiver_id])
        return serialize_request(request, users)

    async def cancel_request(self, user: User, request_id: str):
        if not await repository.cancel_request(request_id, user.id):
            raise NotFoundError("Friend request not found or already handled")

    async def remove_friend(self, user: User, friend_id: str):
        if not await repository.remove_friendship(user.id, friend_id):
            raise NotFoundError("Friendship not found")
        logger.info(f"Friendship removed: {user.id} <-> {friend_id}")

    async def list_friends(
        self, user_id: str, limit: int, offset: int = 0, search: Optional[str] = None
    ) -> Tuple[List[dict], int]:
        friends, total = await repository.list_friends(user_id, limit, offset, search)
        return [user_summary(f) for f in friends], total

    async def list_requests(
        self, user: User, direction: str, limit: int, offset: int = 0
    ) -> Tuple[List[dict], int]:
        requests, total = await repository.list_requests(user.id, direction, limit, offset)
        ids = {r.sender_id for r in requests} | {r.receiver_id for r in requests}
        users = await users_repository.get_users_by_ids(ids)
        return [serialize_request(r, users) for r in requests], total

    async def suggestions(self, user: User, limit: int) -> List[dict]:
        exclude = {user.id}
        exclude.update(await repository.get_friend_ids(user.id))
        exclude.update(await repository.get_block_related_ids(user.id))
        exclude.update(await repository.get_pending_counterparts(user.id))

        ranked = await repository.get_suggestions(user.id, exclude, limit)
        return [
            FriendSuggestion(
                id=u.id,
                name=u.name,
                avatar=u.avatar,
                is_online=bool(u.is_online),
                mutual_friends=mutual,
            ).dump()
            for u, mutual in ranked
        ]

    async def relationship(self, viewer_id: str, other_id: str) -> str:
        """One of self, friends, request_sent, request_received, none."""
        if viewer_id == other_id:
            return "self"
        if await repository.are_friends(viewer_id, other_id):
            return "friends"
        pending = await repository.get_pending_between(viewer_id, other_id)
        if pending:
            return "request_sent" if pending.sender_id == viewer_id else "request_received"
        return "none"

    async def block(self, user: User, target_id: str):
        if user.id == target_id:
            raise BadRequestError("You cannot block yourself")
        target = await users_repository.get_user_by_id(target_id)
        if not target:
            raise NotFoundError("User not found")
        if not await repository.create_block(user.id, target_id):
            raise ConflictError("User is already blocked")
        logger.info(f"User {user.id} blocked {target_id}")

    async def unblock(self, user: User, target_id: str):
        if not await repository.delete_block(user.id, target_id):
            raise NotFoundError("User is not blocked")
        logger.info(f"User {user.id} unblocked {target_id}")


friend_service = FriendService()
