# app/domains/comments/repository.py
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, func, or_, select, update

from app.core.database import get_db
from .models import Comment


async def create_comment(values: Dict) -> Comment:
    async with get_db() as db:
        comment = Comment(id=str(uuid.uuid4()), is_edited=False, **values)
        db.add(comment)
        await db.flush()
        return comment


async def get_comment(comment_id: str) -> Optional[Comment]:
    async with get_db() as db:
        result = await db.execute(select(Comment).filter(Comment.id == comment_id))
        return result.scalar_one_or_none()


async def _page(db, query, limit: int, offset: int) -> Tuple[List[Comment], int]:
    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(query.order_by(Comment.created_at.asc()).limit(limit).offset(offset))
    return list(result.scalars().all()), total


async def list_top_level(post_id: str, limit: int, offset: int = 0) -> Tuple[List[Comment], int]:
    async with get_db() as db:
        query = select(Comment).filter(
            Comment.post_id == post_id, Comment.parent_comment_id.is_(None)
        )
        return await _page(db, query, limit, offset)


async def list_replies(parent_id: str, limit: int, offset: int = 0) -> Tuple[List[Comment], int]:
    async with get_db() as db:
        query = select(Comment).filter(Comment.parent_comment_id == parent_id)
        return await _page(db, query, limit, offset)


async def count_replies(parent_ids: Iterable[str]) -> Dict[str, int]:
    ids = list(set(parent_ids))
    if not ids:
        return {}
    async with get_db() as db:
        result = await db.execute(
            select(Comment.parent_comment_id, func.count())
            .filter(Comment.parent_comment_id.in_(ids))
            .group_by(Comment.parent_comment_id)
        )
        return {parent_id: count for parent_id, count in result.all()}


async def update_comment(comment_id: str, values: Dict) -> Optional[Comment]:
    now = datetime.utcnow()
    async with get_db() as db:
        await db.execute(
            update(Comment)
            .where(Comment.id == comment_id)
            .values(**values, is_edited=True, edited_at=now, updated_at=now)
        )
        result = await db.execute(select(Comment).filter(Comment.id == comment_id))
        return result.scalar_one_or_none()


async def delete_comment(comment_id: str) -> List[str]:
    """Delete a comment and its replies. Returns the deleted ids."""
    async with get_db() as db:
        result = await db.execute(
            select(Comment.id).filter(
                or_(Comment.id == comment_id, Comment.parent_comment_id == comment_id)
            )
        )
        ids = list(result.scalars().all())
        if ids:
            await db.execute(delete(Comment).where(Comment.id.in_(ids)))
        return ids


async def delete_for_post(post_id: str) -> List[str]:
    async with get_db() as db:
        result = await db.execute(select(Comment.id).filter(Comment.post_id == post_id))
        ids = list(result.scalars().all())
        if ids:
            await db.execute(delete(Comment).where(Comment.post_id == post_id))
        return ids
