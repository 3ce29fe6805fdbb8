# app/domains/groups/repository.py
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import String, cast, delete, func, or_, select, update

from app.core.database import get_db
from app.domains.auth.models import User
from .models import Group, GroupJoinRequest, GroupMember


async def create_group(values: Dict, admin_id: str) -> Group:
    async with get_db() as db:
        group = Group(id=str(uuid.uuid4()), admin_id=admin_id, is_active=True, **values)
        db.add(group)
        await db.flush()
        db.add(GroupMember(id=str(uuid.uuid4()), group_id=group.id, user_id=admin_id, role="admin"))
        return group


async def get_group(group_id: str) -> Optional[Group]:
    async with get_db() as db:
        result = await db.execute(select(Group).filter(Group.id == group_id))
        return result.scalar_one_or_none()


async def get_groups_by_ids(group_ids: Iterable[str]) -> Dict[str, Group]:
    ids = list(set(group_ids))
    if not ids:
        return {}
    async with get_db() as db:
        result = await db.execute(select(Group).filter(Group.id.in_(ids)))
        return {g.id: g for g in result.scalars().all()}


async def get_membership(group_id: str, user_id: str) -> Optional[GroupMember]:
    async with get_db() as db:
        result = await db.execute(
            select(GroupMember).filter(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        )
        return result.scalar_one_or_none()


async def get_memberships(user_id: str, group_ids: Iterable[str]) -> Dict[str, GroupMember]:
    ids = list(set(group_ids))
    if not ids:
        return {}
    async with get_db() as db:
        result = await db.execute(
            select(GroupMember).filter(GroupMember.user_id == user_id, GroupMember.group_id.in_(ids))
        )
        return {m.group_id: m for m in result.scalars().all()}


async def _page(db, query, limit: int, offset: int) -> Tuple[List[Group], int]:
    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(query.order_by(Group.created_at.desc()).limit(limit).offset(offset))
    return list(result.scalars().all()), total


async def list_groups(
    limit: int,
    offset: int = 0,
    category: Optional[str] = None,
    privacy: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[List[Group], int]:
    async with get_db() as db:
        query = select(Group).filter(Group.is_active.is_(True))
        if category:
            query = query.filter(Group.category == category)
        if privacy:
            query = query.filter(Group.privacy == privacy)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(Group.name).like(pattern),
                    func.lower(Group.description).like(pattern),
                    func.lower(cast(Group.tags, String)).like(pattern),
                )
            )
        return await _page(db, query, limit, offset)


async def list_user_groups(user_id: str, limit: int, offset: int = 0) -> Tuple[List[Group], int]:
    async with get_db() as db:
        query = (
            select(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .filter(GroupMember.user_id == user_id, Group.is_active.is_(True))
        )
        return await _page(db, query, limit, offset)


async def suggest_groups(user_id: str, limit: int) -> List[Group]:
    """Active public groups the user has not joined, largest first."""
    async with get_db() as db:
        joined = select(GroupMember.group_id).filter(GroupMember.user_id == user_id)
        members = (
            select(GroupMember.group_id, func.count().label("members"))
            .group_by(GroupMember.group_id)
            .subquery()
        )
        result = await db.execute(
            select(Group)
            .outerjoin(members, members.c.group_id == Group.id)
            .filter(
                Group.is_active.is_(True),
                Group.privacy == "public",
                Group.id.not_in(joined),
            )
            .order_by(func.coalesce(members.c.members, 0).desc(), Group.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())


async def count_members(group_ids: Iterable[str]) -> Dict[str, int]:
    ids = list(set(group_ids))
    if not ids:
        return {}
    async with get_db() as db:
        result = await db.execute(
            select(GroupMember.group_id, func.count())
            .filter(GroupMember.group_id.in_(ids))
            .group_by(GroupMember.group_id)
        )
        return {group_id: count for group_id, count in result.all()}


async def count_pending(group_ids: Iterable[str]) -> Dict[str, int]:
    ids = list(set(group_ids))
    if not ids:
        return {}
    async with get_db() as db:
        result = await db.execute(
            select(GroupJoinRequest.group_id, func.count())
            .filter(GroupJoinRequest.group_id.in_(ids))
            .group_by(GroupJoinRequest.group_id)
        )
        return {group_id: count for group_id, count in result.all()}


async def get_moderator_ids(group_ids: Iterable[str]) -> Dict[str, List[str]]:
    ids = list(set(group_ids))
    if not ids:
        return {}
    async with get_db() as db:
        result = await db.execute(
            select(GroupMember.group_id, GroupMember.user_id).filter(
                GroupMember.group_id.in_(ids), GroupMember.role == "moderator"
            )
        )
        moderators: Dict[str, List[str]] = {}
        for group_id, user_id in result.all():
            moderators.setdefault(group_id, []).append(user_id)
        return moderators


async def update_group(group_id: str, values: Dict) -> Optional[Group]:
    async with get_db() as db:
        if values:
            await db.execute(
                update(Group).where(Group.id == group_id).values(**values, updated_at=datetime.utcnow())
            )
        result = await db.execute(select(Group).filter(Group.id == group_id))
        return result.scalar_one_or_none()


async def add_member(group_id: str, user_id: str, role: str = "member") -> GroupMember:
    async with get_db() as db:
        await db.execute(
            delete(GroupJoinRequest).where(
                GroupJoinRequest.group_id == group_id, GroupJoinRequest.user_id == user_id
            )
        )
        member = GroupMember(id=str(uuid.uuid4()), group_id=group_id, user_id=user_id, role=role)
        db.add(member)
        await db.flush()
        return member


async def remove_member(group_id: str, user_id: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            delete(GroupMember).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        )
        return result.rowcount > 0


async def set_role(group_id: str, user_id: str, role: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            update(GroupMember)
            .where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
            .values(role=role, updated_at=datetime.utcnow())
        )
        return result.rowcount > 0


async def list_members(
    group_id: str, limit: int, offset: int = 0
) -> Tuple[List[Tuple[GroupMember, User]], int]:
    async with get_db() as db:
        query = (
            select(GroupMember, User)
            .join(User, User.id == GroupMember.user_id)
            .filter(GroupMember.group_id == group_id)
        )
        total = (
            await db.execute(
                select(func.count()).select_from(GroupMember).filter(GroupMember.group_id == group_id)
            )
        ).scalar_one()
        result = await db.execute(query.order_by(GroupMember.created_at).limit(limit).offset(offset))
        return [(member, user) for member, user in result.all()], total


async def create_join_request(group_id: str, user_id: str, message: Optional[str]) -> GroupJoinRequest:
    async with get_db() as db:
        request = GroupJoinRequest(
            id=str(uuid.uuid4()), group_id=group_id, user_id=user_id, message=message
        )
        db.add(request)
        await db.flush()
        return request


async def get_join_request(group_id: str, user_id: str) -> Optional[GroupJoinRequest]:
    async with get_db() as db:
        result = await db.execute(
            select(GroupJoinRequest).filter(
                GroupJoinRequest.group_id == group_id, GroupJoinRequest.user_id == user_id
            )
        )
        return result.scalar_one_or_none()


async def delete_join_request(group_id: str, user_id: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            delete(GroupJoinRequest).where(
                GroupJoinRequest.group_id == group_id, GroupJoinRequest.user_id == user_id
            )
        )
        return result.rowcount > 0


async def list_join_requests(
    group_id: str, limit: int, offset: int = 0
) -> Tuple[List[Tuple[GroupJoinRequest, User]], int]:
    async with get_db() as db:
        total = (
            await db.execute(
                select(func.count())
                .select_from(GroupJoinRequest)
                .filter(GroupJoinRequest.group_id == group_id)
            )
        ).scalar_one()
        result = await db.execute(
            select(GroupJoinRequest, User)
            .join(User, User.id == GroupJoinRequest.user_id)
            .filter(GroupJoinRequest.group_id == group_id)
            .order_by(GroupJoinRequest.created_at)
            .limit(limit)
            .offset(offset)
        )
        return [(request, user) for request, user in result.all()], total
