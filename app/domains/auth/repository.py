import uuid
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy import and_, select, update

from app.core.database import get_db
from app.shared.utils.logger import get_logger
from .models import User

logger = get_logger(__name__)


async def get_user_by_id(user_id: str) -> Optional[User]:
    async with get_db() as db:
        result = await db.execute(select(User).filter(User.id == user_id))
        return result.scalar_one_or_none()


async def get_user_by_email(email: str) -> Optional[User]:
    async with get_db() as db:
        result = await db.execute(select(User).filter(User.email == email.lower()))
        return result.scalar_one_or_none()


async def get_users_by_ids(user_ids: Iterable[str]) -> Dict[str, User]:
    ids = set(user_ids)
    if not ids:
        return {}
    async with get_db() as db:
        result = await db.execute(select(User).filter(User.id.in_(ids)))
        return {u.id: u for u in result.scalars().all()}


async def create_user(user_data: Dict) -> User:
    async with get_db() as db:
        new_user = User(
            id=str(uuid.uuid4()),
            name=user_data["name"],
            email=user_data["email"].lower(),
            password_hash=user_data.get("password_hash"),
            google_id=user_data.get("google_id"),
            facebook_id=user_data.get("facebook_id"),
            avatar=user_data.get("avatar"),
        )
        db.add(new_user)
        await db.flush()
        await db.refresh(new_user)
        logger.info(f"Created user {new_user.id}")
        return new_user


async def update_user(user_id: str, values: Dict) -> Optional[User]:
    async with get_db() as db:
        if values:
            await db.execute(
                update(User)
                .where(User.id == user_id)
                .values(**values, updated_at=datetime.utcnow())
            )
        result = await db.execute(select(User).filter(User.id == user_id))
        return result.scalar_one_or_none()


async def set_presence(user_id: str, is_online: bool):
    async with get_db() as db:
        await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(is_online=is_online, last_seen=datetime.utcnow())
        )


def _like_pattern(term: str) -> str:
    escaped = term.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


async def search_users(term: str, limit: int, exclude: Iterable[str] = ()) -> List[User]:
    """Active users whose name or bio contains the term. Emails are never matched."""
    pattern = _like_pattern(term)
    async with get_db() as db:
        query = select(User).filter(
            User.is_active.is_(True),
            User.name.ilike(pattern, escape="\\") | User.bio.ilike(pattern, escape="\\"),
        )
        excluded = set(exclude)
        if excluded:
            query = query.filter(User.id.not_in(excluded))
        result = await db.execute(query.order_by(User.name).limit(limit))
        return list(result.scalars().all())


async def reset_stale_presence(stale_minutes: int) -> int:
    """Mark users offline whose last heartbeat is older than the window."""
    cutoff = datetime.utcnow() - timedelta(minutes=stale_minutes)
    async with get_db() as db:
        result = await db.execute(
            update(User)
            .where(and_(User.is_online.is_(True), User.last_seen < cutoff))
            .values(is_online=False)
        )
        return result.rowcount or 0


async def touch_online_users(user_ids: Iterable[str]):
    ids = list(user_ids)
    if not ids:
        return
    async with get_db() as db:
        await db.execute(
            update(User).where(User.id.in_(ids)).values(last_seen=datetime.utcnow())
        )
