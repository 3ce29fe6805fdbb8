# app/domains/groups/service.py
"""
Groups and pages: membership, join requests and moderation.

Every group has exactly one admin, who is also a member with role
``admin``. Moderators are members with role ``moderator``. Public groups
admit members directly; private groups queue a join request that an admin
or moderator approves.
"""
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from app.domains.auth.models import User
from app.domains.auth.repository import get_user_by_id, get_users_by_ids
from app.domains.auth.schemas import UserSummary
from app.domains.notifications.schemas import NotificationType
from app.domains.notifications.service import notification_service
from app.domains.posts import repository as posts_repository
from app.domains.posts.service import post_service
from app.shared.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.shared.utils.logger import get_logger
from . import repository
from .models import Group
from .schemas import (
    GroupCreate,
    GroupJoinRequestOut,
    GroupMemberOut,
    GroupOut,
    GroupPrivacy,
    GroupUpdate,
    MemberRole,
)

logger = get_logger(__name__)

MANAGER_ROLES = {MemberRole.ADMIN.value, MemberRole.MODERATOR.value}


class GroupService:
    async def _active_group(self, group_id: str) -> Group:
        group = await repository.get_group(group_id)
        if not group or not group.is_active:
            raise NotFoundError("Group not found")
        return group

    async def _require_manager(self, group: Group, user: User):
        membership = await repository.get_membership(group.id, user.id)
        if not membership or membership.role not in MANAGER_ROLES:
            raise ForbiddenError("Only the group admin or moderators can do this")

    async def _require_admin(self, group: Group, user: User):
        if group.admin_id != user.id:
            raise ForbiddenError("Only the group admin can do this")

    async def _require_visible(self, group: Group, user: User):
        if group.privacy == GroupPrivacy.PRIVATE.value:
            if not await repository.get_membership(group.id, user.id):
                raise ForbiddenError("This group is private")

    async def serialize(self, groups: Iterable[Group], viewer_id: str) -> List[dict]:
        groups = list(groups)
        ids = [g.id for g in groups]
        admins = await get_users_by_ids(g.admin_id for g in groups)
        members = await repository.count_members(ids)
        pending = await repository.count_pending(ids)
        moderators = await repository.get_moderator_ids(ids)
        memberships = await repository.get_memberships(viewer_id, ids)

        result = []
        for group in groups:
            admin = admins.get(group.admin_id)
            membership = memberships.get(group.id)
            has_pending = False
            if not membership and group.privacy == GroupPrivacy.PRIVATE.value:
                has_pending = await repository.get_join_request(group.id, viewer_id) is not None
            result.append(
                GroupOut(
                    id=group.id,
                    name=group.name,
                    description=group.description,
                    type=group.type,
                    category=group.category,
                    privacy=group.privacy,
                    avatar=group.avatar,
                    cover_photo=group.cover_photo,
                    admin=UserSummary.model_validate(admin) if admin else None,
                    moderators=moderators.get(group.id, []),
                    rules=group.rules or [],
                    tags=group.tags or [],
                    location=group.location,
                    website=group.website,
                    is_active=bool(group.is_active),
                    members_count=members.get(group.id, 0),
                    pending_requests_count=pending.get(group.id, 0),
                    is_member=membership is not None,
                    role=membership.role if membership else None,
                    has_pending_request=has_pending,
                    created_at=group.created_at,
                    updated_at=group.updated_at,
                ).dump()
            )
        return result

    async def serialize_one(self, group: Group, viewer_id: str) -> dict:
        return (await self.serialize([group], viewer_id))[0]

    async def create_group(self, user: User, request: GroupCreate) -> dict:
        values = request.model_dump()
        values["name"] = values["name"].strip()
        values["type"] = request.type.value
        values["privacy"] = request.privacy.value
        values["tags"] = [t.strip().lower() for t in request.tags if t.strip()]
        group = await repository.create_group(values, user.id)
        logger.info(f"Group {group.id} created by {user.id}")
        return await self.serialize_one(group, user.id)

    async def list_groups(
        self,
        user: User,
        limit: int,
        offset: int,
        category: Optional[str] = None,
        privacy: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[dict], int]:
        groups, total = await repository.list_groups(limit, offset, category, privacy, search)
        return await self.serialize(groups, user.id), total

    async def user_groups(
        self, viewer: User, user_id: str, limit: int, offset: int
    ) -> Tuple[List[dict], int]:
        groups, total = await repository.list_user_groups(user_id, limit, offset)
        return await self.serialize(groups, viewer.id), total

    async def suggestions(self, user: User, limit: int) -> List[dict]:
        return await self.serialize(await repository.suggest_groups(user.id, limit), user.id)

    async def get_group(self, user: User, group_id: str) -> dict:
        group = await self._active_group(group_id)
        return await self.serialize_one(group, user.id)

    async def update_group(self, user: User, group_id: str, request: GroupUpdate) -> dict:
        group = await self._active_group(group_id)
        await self._require_manager(group, user)

        values = request.model_dump(exclude_none=True)
        if request.privacy is not None:
            values["privacy"] = request.privacy.value
        if request.tags is not None:
            values["tags"] = [t.strip().lower() for t in request.tags if t.strip()]
        group = await repository.update_group(group_id, values)
        return await self.serialize_one(group, user.id)

    async def delete_group(self, user: User, group_id: str):
        group = await self._active_group(group_id)
        await self._require_admin(group, user)
        await repository.update_group(group_id, {"is_active": False})
        logger.info(f"Group {group_id} deactivated by {user.id}")

    async def join(self, user: User, group_id: str, message: Optional[str] = None) -> dict:
        group = await self._active_group(group_id)
        if await repository.get_membership(group.id, user.id):
            raise ConflictError("You are already a member of this group")

        if group.privacy == GroupPrivacy.PRIVATE.value:
            if await repository.get_join_request(group.id, user.id):
                raise ConflictError("Join request already sent")
            try:
                await repository.create_join_request(group.id, user.id, message)
            except IntegrityError:
                raise ConflictError("Join request already sent")
            return {"status": "pending", "group": await self.serialize_one(group, user.id)}

        try:
            await repository.add_member(group.id, user.id)
        except IntegrityError:
            raise ConflictError("You are already a member of this group")
        return {"status": "joined", "group": await self.serialize_one(group, user.id)}

    async def leave(self, user: User, group_id: str):
        group = await self._active_group(group_id)
        if group.admin_id == user.id:
            raise BadRequestError("The group admin cannot leave the group")
        if not await repository.remove_member(group.id, user.id):
            # Leaving also withdraws a pending join request
            if not await repository.delete_join_request(group.id, user.id):
                raise BadRequestError("You are not a member of this group")

    async def posts(self, user: User, group_id: str, limit: int, offset: int) -> Tuple[List[dict], int]:
        group = await self._active_group(group_id)
        await self._require_visible(group, user)
        posts, total = await posts_repository.get_group_posts(group.id, limit, offset)
        return await post_service.serialize(posts, user.id), total

    async def members(self, user: User, group_id: str, limit: int, offset: int) -> Tuple[List[dict], int]:
        group = await self._active_group(group_id)
        await self._require_visible(group, user)
        rows, total = await repository.list_members(group.id, limit, offset)
        return [
            GroupMemberOut(
                user=UserSummary.model_validate(member_user),
                role=member.role,
                joined_at=member.created_at,
            ).dump()
            for member, member_user in rows
        ], total

    async def join_requests(
        self, user: User, group_id: str, limit: int, offset: int
    ) -> Tuple[List[dict], int]:
        group = await self._active_group(group_id)
        await self._require_manager(group, user)
        rows, total = await repository.list_join_requests(group.id, limit, offset)
        return [
            GroupJoinRequestOut(
                user=UserSummary.model_validate(requester),
                message=request.message,
                requested_at=request.created_at,
            ).dump()
            for request, requester in rows
        ], total

    async def approve_request(self, user: User, group_id: str, requester_id: str):
        group = await self._active_group(group_id)
        await self._require_manager(group, user)
        if not await repository.get_join_request(group.id, requester_id):
            raise NotFoundError("Join request not found")
        await repository.add_member(group.id, requester_id)
        logger.info(f"Join request approved: group={group_id} user={requester_id}")

    async def reject_request(self, user: User, group_id: str, requester_id: str):
        group = await self._active_group(group_id)
        await self._require_manager(group, user)
        if not await repository.delete_join_request(group.id, requester_id):
            raise NotFoundError("Join request not found")

    async def add_moderator(self, user: User, group_id: str, member_id: str):
        group = await self._active_group(group_id)
        await self._require_admin(group, user)
        if member_id == group.admin_id:
            raise BadRequestError("The admin is already managing this group")
        membership = await repository.get_membership(group.id, member_id)
        if not membership:
            raise NotFoundError("User is not a member of this group")
        if membership.role == MemberRole.MODERATOR.value:
            raise ConflictError("User is already a moderator")
        await repository.set_role(group.id, member_id, MemberRole.MODERATOR.value)

    async def remove_moderator(self, user: User, group_id: str, member_id: str):
        group = await self._active_group(group_id)
        await self._require_admin(group, user)
        membership = await repository.get_membership(group.id, member_id)
        if not membership or membership.role != MemberRole.MODERATOR.value:
            raise NotFoundError("User is not a moderator of this group")
        await repository.set_role(group.id, member_id, MemberRole.MEMBER.value)

    async def invite(self, user: User, group_id: str, invitee_id: str):
        group = await self._active_group(group_id)
        if not await repository.get_membership(group.id, user.id):
            raise ForbiddenError("Only members can invite to this group")
        invitee = await get_user_by_id(invitee_id)
        if not invitee or not invitee.is_active:
            raise NotFoundError("User not found")
        if await repository.get_membership(group.id, invitee_id):
            raise ConflictError("User is already a member of this group")
        await notification_service.notify(
            invitee_id,
            user.id,
            NotificationType.GROUP_INVITE,
            f"{user.name} invited you to join {group.name}",
            related_group_id=group.id,
        )


group_service = GroupService()
