# app/domains/friends/repository.py
import uuid
from datetime import datetime
from typing import List, Optional, Set, Tuple

from sqlalchemy import and_, delete, func, or_, select, update

from app.core.database import get_db
from app.domains.auth.models import User
from app.shared.utils.logger import get_logger
from .models import Block, FriendRequest, Friendship

logger = get_logger(__name__)


def _between(a: str, b: str):
    return or_(
        and_(FriendRequest.sender_id == a, FriendRequest.receiver_id == b),
        and_(FriendRequest.sender_id == b, FriendRequest.receiver_id == a),
    )


async def get_request(request_id: str) -> Optional[FriendRequest]:
    async with get_db() as db:
        result = await db.execute(select(FriendRequest).filter(FriendRequest.id == request_id))
        return result.scalar_one_or_none()


async def get_pending_between(a: str, b: str) -> Optional[FriendRequest]:
    """Pending request in either direction."""
    async with get_db() as db:
        result = await db.execute(
            select(FriendRequest).filter(_between(a, b), FriendRequest.status == "pending")
        )
        return result.scalars().first()


async def create_request(sender_id: str, receiver_id: str, message: Optional[str]) -> FriendRequest:
    async with get_db() as db:
        # A finished request in the same direction would collide with the unique pair index
        await db.execute(
            delete(FriendRequest).where(
                FriendRequest.sender_id == sender_id,
                FriendRequest.receiver_id == receiver_id,
                FriendRequest.status != "pending",
            )
        )
        request = FriendRequest(
            id=str(uuid.uuid4()),
            sender_id=sender_id,
            receiver_id=receiver_id,
            message=message,
            status="pending",
        )
        db.add(request)
        await db.flush()
        return request


async def accept_request(request_id: str, receiver_id: str) -> Optional[FriendRequest]:
    """Move a pending request to accepted and link both users, atomically.

    Returns None when the request does not exist, belongs to someone else or
    was already handled; the conditional UPDATE guarantees a single winner.
    """
    now = datetime.utcnow()
    async with get_db() as db:
        result = await db.execute(
            update(FriendRequest)
            .where(
                FriendRequest.id == request_id,
                FriendRequest.receiver_id == receiver_id,
                FriendRequest.status == "pending",
            )
            .values(status="accepted", responded_at=now, updated_at=now)
        )
        if result.rowcount != 1:
            return None

        request = (
            await db.execute(select(FriendRequest).filter(FriendRequest.id == request_id))
        ).scalar_one()

        existing = await db.execute(
            select(Friendship.user_id, Friendship.friend_id).filter(
                or_(
                    and_(Friendship.user_id == request.sender_id, Friendship.friend_id == request.receiver_id),
                    and_(Friendship.user_id == request.receiver_id, Friendship.friend_id == request.sender_id),
                )
            )
        )
        present = set(existing.all())
        for user_id, friend_id in (
            (request.sender_id, request.receiver_id),
            (request.receiver_id, request.sender_id),
        ):
            if (user_id, friend_id) not in present:
                db.add(Friendship(id=str(uuid.uuid4()), user_id=user_id, friend_id=friend_id))
        return request


async def reject_request(request_id: str, receiver_id: str) -> Optional[FriendRequest]:
    now = datetime.utcnow()
    async with get_db() as db:
        result = await db.execute(
            update(FriendRequest)
            .where(
                FriendRequest.id == request_id,
                FriendRequest.receiver_id == receiver_id,
                FriendRequest.status == "pending",
            )
            .values(status="rejected", responded_at=now, updated_at=now)
        )
        if result.rowcount != 1:
            return None
        return (
            await db.execute(select(FriendRequest).filter(FriendRequest.id == request_id))
        ).scalar_one()


async def cancel_request(request_id: str, sender_id: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            delete(FriendRequest).where(
                FriendRequest.id == request_id,
                FriendRequest.sender_id == sender_id,
                FriendRequest.status == "pending",
            )
        )
        return result.rowcount == 1


async def list_requests(
    user_id: str, direction: str, limit: int, offset: int = 0
) -> Tuple[List[FriendRequest], int]:
    """Pending requests received (direction='received') or sent ('sent')."""
    column = FriendRequest.receiver_id if direction == "received" else FriendRequest.sender_id
    condition = and_(column == user_id, FriendRequest.status == "pending")
    async with get_db() as db:
        total = (
            await db.execute(select(func.count()).select_from(FriendRequest).filter(condition))
        ).scalar_one()
        result = await db.execute(
            select(FriendRequest)
            .filter(condition)
            .order_by(FriendRequest.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total


async def are_friends(a: str, b: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            select(Friendship.id).filter(Friendship.user_id == a, Friendship.friend_id == b)
        )
        return result.first() is not None


async def get_friend_ids(user_id: str) -> List[str]:
    async with get_db() as db:
        result = await db.execute(
            select(Friendship.friend_id).filter(Friendship.user_id == user_id)
        )
        return list(result.scalars().all())


async def count_friends(user_id: str) -> int:
    async with get_db() as db:
        result = await db.execute(
            select(func.count()).select_from(Friendship).filter(Friendship.user_id == user_id)
        )
        return result.scalar_one()


async def list_friends(
    user_id: str, limit: int, offset: int = 0, search: Optional[str] = None
) -> Tuple[List[User], int]:
    async with get_db() as db:
        query = (
            select(User)
            .join(Friendship, Friendship.friend_id == User.id)
            .filter(Friendship.user_id == user_id, User.is_active.is_(True))
        )
        if search:
            query = query.filter(User.name.ilike(f"%{search.strip()}%"))
        total = (
            await db.execute(select(func.count()).select_from(query.subquery()))
        ).scalar_one()
        result = await db.execute(query.order_by(User.name).limit(limit).offset(offset))
        return list(result.scalars().all()), total


async def remove_friendship(a: str, b: str) -> int:
    async with get_db() as db:
        result = await db.execute(
            delete(Friendship).where(
                or_(
                    and_(Friendship.user_id == a, Friendship.friend_id == b),
                    and_(Friendship.user_id == b, Friendship.friend_id == a),
                )
            )
        )
        await db.execute(
            delete(FriendRequest).where(_between(a, b), FriendRequest.status == "accepted")
        )
        return result.rowcount or 0


async def is_blocked_between(a: str, b: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            select(Block.id).filter(
                or_(
                    and_(Block.blocker_id == a, Block.blocked_id == b),
                    and_(Block.blocker_id == b, Block.blocked_id == a),
                )
            )
        )
        return result.first() is not None


async def has_blocked(blocker_id: str, blocked_id: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            select(Block.id).filter(Block.blocker_id == blocker_id, Block.blocked_id == blocked_id)
        )
        return result.first() is not None


async def get_block_related_ids(user_id: str) -> Set[str]:
    """Users this user blocked plus users who blocked this user."""
    async with get_db() as db:
        result = await db.execute(
            select(Block.blocker_id, Block.blocked_id).filter(
                or_(Block.blocker_id == user_id, Block.blocked_id == user_id)
            )
        )
        related = set()
        for blocker_id, blocked_id in result.all():
            related.add(blocked_id if blocker_id == user_id else blocker_id)
        return related


async def get_blocked_ids(user_id: str) -> List[str]:
    async with get_db() as db:
        result = await db.execute(select(Block.blocked_id).filter(Block.blocker_id == user_id))
        return list(result.scalars().all())


async def create_block(blocker_id: str, blocked_id: str) -> bool:
    """Block a user and sever friendship and requests between the pair."""
    async with get_db() as db:
        existing = await db.execute(
            select(Block.id).filter(Block.blocker_id == blocker_id, Block.blocked_id == blocked_id)
        )
        if existing.first() is not None:
            return False
        db.add(Block(id=str(uuid.uuid4()), blocker_id=blocker_id, blocked_id=blocked_id))
        await db.execute(
            delete(Friendship).where(
                or_(
                    and_(Friendship.user_id == blocker_id, Friendship.friend_id == blocked_id),
                    and_(Friendship.user_id == blocked_id, Friendship.friend_id == blocker_id),
                )
            )
        )
        await db.execute(delete(FriendRequest).where(_between(blocker_id, blocked_id)))
        return True


async def delete_block(blocker_id: str, blocked_id: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            delete(Block).where(Block.blocker_id == blocker_id, Block.blocked_id == blocked_id)
        )
        return result.rowcount > 0


async def get_pending_counterparts(user_id: str) -> Set[str]:
    async with get_db() as db:
        result = await db.execute(
            select(FriendRequest.sender_id, FriendRequest.receiver_id).filter(
                or_(FriendRequest.sender_id == user_id, FriendRequest.receiver_id == user_id),
                FriendRequest.status == "pending",
            )
        )
        return {r if s == user_id else s for s, r in result.all()}


async def get_suggestions(user_id: str, exclude: Set[str], limit: int) -> List[Tuple[User, int]]:
    """People the user may know, ranked by mutual friend count, then newest."""
    async with get_db() as db:
        friend_ids = select(Friendship.friend_id).filter(Friendship.user_id == user_id)
        mutual_rows = await db.execute(
            select(Friendship.friend_id, func.count().label("mutual"))
            .filter(
                Friendship.user_id.in_(friend_ids),
                Friendship.friend_id.not_in(exclude),
            )
            .group_by(Friendship.friend_id)
            .order_by(func.count().desc())
            .limit(limit)
        )
        mutual = {fid: count for fid, count in mutual_rows.all()}

        users = {}
        if mutual:
            result = await db.execute(
                select(User).filter(User.id.in_(mutual.keys()), User.is_active.is_(True))
            )
            users = {u.id: u for u in result.scalars().all()}

        ranked = sorted(
            ((users[uid], count) for uid, count in mutual.items() if uid in users),
            key=lambda pair: -pair[1],
        )

        if len(ranked) < limit:
            taken = set(exclude) | set(users.keys())
            result = await db.execute(
                select(User)
                .filter(User.id.not_in(taken), User.is_active.is_(True))
                .order_by(User.created_at.desc())
                .limit(limit - len(ranked))
            )
            ranked.extend((u, 0) for u in result.scalars().all())

        return ranked
