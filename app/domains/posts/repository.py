# app/domains/posts/repository.py
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import String, and_, case, cast, delete, func, or_, select, update

from app.core.database import get_db
from .models import Post, SavedPost

SORTS = {
    "newest": (Post.created_at.desc(),),
    "-createdAt": (Post.created_at.desc(),),
    "createdAt": (Post.created_at.asc(),),
    "oldest": (Post.created_at.asc(),),
    "popular": ((Post.comments_count + Post.shares_count).desc(), Post.created_at.desc()),
}


def _search(query, search: Optional[str]):
    if not search:
        return query
    pattern = f"%{search.strip().lower()}%"
    return query.filter(
        or_(func.lower(Post.content).like(pattern), func.lower(cast(Post.tags, String)).like(pattern))
    )


async def _page(db, query, sort: str, limit: int, offset: int) -> Tuple[List[Post], int]:
    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(
        query.order_by(*SORTS.get(sort, SORTS["newest"])).limit(limit).offset(offset)
    )
    return list(result.scalars().all()), total


async def create_post(values: Dict) -> Post:
    async with get_db() as db:
        post = Post(id=str(uuid.uuid4()), comments_count=0, shares_count=0, **values)
        db.add(post)
        await db.flush()
        return post


async def get_post(post_id: str) -> Optional[Post]:
    async with get_db() as db:
        result = await db.execute(select(Post).filter(Post.id == post_id))
        return result.scalar_one_or_none()


async def get_posts_by_ids(post_ids: Iterable[str]) -> Dict[str, Post]:
    ids = set(post_ids)
    if not ids:
        return {}
    async with get_db() as db:
        result = await db.execute(select(Post).filter(Post.id.in_(ids)))
        return {p.id: p for p in result.scalars().all()}


async def get_feed(
    viewer_id: str,
    friend_ids: Iterable[str],
    excluded_authors: Set[str],
    limit: int,
    offset: int = 0,
    sort: str = "newest",
    search: Optional[str] = None,
) -> Tuple[List[Post], int]:
    """Public posts, friends-visible posts of friends and the viewer's own posts."""
    friends = list(friend_ids)
    async with get_db() as db:
        query = select(Post).filter(
            Post.group_id.is_(None),
            or_(
                Post.author_id == viewer_id,
                Post.visibility == "public",
                and_(Post.visibility == "friends", Post.author_id.in_(friends)),
            ),
        )
        if excluded_authors:
            query = query.filter(Post.author_id.not_in(excluded_authors))
        return await _page(db, _search(query, search), sort, limit, offset)


async def get_user_posts(
    author_id: str, visibilities: Iterable[str], limit: int, offset: int = 0
) -> Tuple[List[Post], int]:
    async with get_db() as db:
        query = select(Post).filter(
            Post.author_id == author_id,
            Post.group_id.is_(None),
            Post.visibility.in_(list(visibilities)),
        )
        return await _page(db, query, "newest", limit, offset)


async def get_group_posts(group_id: str, limit: int, offset: int = 0) -> Tuple[List[Post], int]:
    async with get_db() as db:
        query = select(Post).filter(Post.group_id == group_id)
        return await _page(db, query, "newest", limit, offset)


async def count_user_posts(author_id: str) -> int:
    async with get_db() as db:
        result = await db.execute(
            select(func.count()).select_from(Post).filter(Post.author_id == author_id)
        )
        return result.scalar_one()


async def update_post(post_id: str, values: Dict) -> Optional[Post]:
    now = datetime.utcnow()
    async with get_db() as db:
        await db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(**values, is_edited=True, edited_at=now, updated_at=now)
        )
        result = await db.execute(select(Post).filter(Post.id == post_id))
        return result.scalar_one_or_none()


async def adjust_counter(post_id: str, column: str, delta: int):
    """Atomically add delta to comments_count or shares_count, never below zero."""
    field = getattr(Post, column)
    async with get_db() as db:
        await db.execute(
            update(Post)
            .where(Post.id == post_id)
            .values({column: case((field + delta < 0, 0), else_=field + delta)})
        )


async def delete_post(post_id: str) -> bool:
    async with get_db() as db:
        await db.execute(delete(SavedPost).where(SavedPost.post_id == post_id))
        await db.execute(
            update(Post).where(Post.shared_post_id == post_id).values(shared_post_id=None)
        )
        result = await db.execute(delete(Post).where(Post.id == post_id))
        return result.rowcount > 0


async def save_post(user_id: str, post_id: str) -> SavedPost:
    async with get_db() as db:
        saved = SavedPost(id=str(uuid.uuid4()), user_id=user_id, post_id=post_id)
        db.add(saved)
        await db.flush()
        return saved


async def unsave_post(user_id: str, post_id: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            delete(SavedPost).where(SavedPost.user_id == user_id, SavedPost.post_id == post_id)
        )
        return result.rowcount > 0


async def get_saved_ids(user_id: str, post_ids: Iterable[str]) -> Set[str]:
    ids = list(set(post_ids))
    if not ids:
        return set()
    async with get_db() as db:
        result = await db.execute(
            select(SavedPost.post_id).filter(SavedPost.user_id == user_id, SavedPost.post_id.in_(ids))
        )
        return set(result.scalars().all())


async def get_saved_posts(
    user_id: str, limit: int, offset: int = 0
) -> Tuple[List[Tuple[Post, datetime]], int]:
    """Saved posts of a user with the time each was saved, most recent first."""
    async with get_db() as db:
        query = (
            select(Post, SavedPost.created_at)
            .join(SavedPost, SavedPost.post_id == Post.id)
            .filter(SavedPost.user_id == user_id)
        )
        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(
            query.order_by(SavedPost.created_at.desc()).limit(limit).offset(offset)
        )
        return [(post, saved_at) for post, saved_at in result.all()], total
