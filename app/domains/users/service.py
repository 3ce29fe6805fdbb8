# app/domains/users/service.py
from typing import List, Tuple

from app.core.websocket_manager import websocket_manager
from app.domains.auth import repository as users_repository
from app.domains.auth.models import User
from app.domains.auth.schemas import Visibility, user_profile, user_summary
from app.domains.friends import repository as friends_repository
from app.domains.friends.service import friend_service
from app.domains.groups.service import group_service
from app.domains.posts import repository as posts_repository
from app.shared.exceptions import ForbiddenError, NotFoundError
from app.shared.utils.logger import get_logger
from .schemas import ProfileUpdate

logger = get_logger(__name__)


class UserService:
    async def _profile(self, user: User) -> dict:
        return user_profile(
            user,
            friends_count=await friends_repository.count_friends(user.id),
            posts_count=await posts_repository.count_user_posts(user.id),
        )

    async def _active_user(self, user_id: str) -> User:
        user = await users_repository.get_user_by_id(user_id)
        if not user or not user.is_active:
            raise NotFoundError("User not found")
        return user

    async def _allowed(self, viewer: User, owner: User, visibility: str) -> bool:
        if viewer.id == owner.id or visibility == Visibility.PUBLIC.value:
            return True
        if visibility == Visibility.FRIENDS.value:
            return await friends_repository.are_friends(viewer.id, owner.id)
        return False

    async def get_own_profile(self, user: User) -> dict:
        return await self._profile(user)

    async def update_profile(self, user: User, request: ProfileUpdate) -> dict:
        values = request.model_dump(exclude_none=True, exclude={"privacy"})
        if "name" in values:
            values["name"] = values["name"].strip()
        if request.gender is not None:
            values["gender"] = request.gender.value
        if request.privacy is not None:
            for field, value in request.privacy.model_dump(exclude_none=True).items():
                values[field] = Visibility(value).value

        updated = await users_repository.update_user(user.id, values)
        logger.info(f"Profile updated for {user.id}: {sorted(values)}")
        return await self._profile(updated)

    async def get_profile(self, viewer: User, user_id: str) -> dict:
        owner = await self._active_user(user_id)
        if viewer.id != owner.id:
            if await friends_repository.is_blocked_between(viewer.id, owner.id):
                raise NotFoundError("User not found")
            if not await self._allowed(viewer, owner, owner.profile_visibility):
                raise ForbiddenError("This profile is private")

        profile = await self._profile(owner)
        if viewer.id != owner.id:
            profile.pop("email", None)
        profile["friendshipStatus"] = await friend_service.relationship(viewer.id, owner.id)
        profile["isBlocked"] = await friends_repository.has_blocked(viewer.id, owner.id)
        return profile

    async def get_friends(
        self, viewer: User, user_id: str, limit: int, offset: int
    ) -> Tuple[List[dict], int]:
        owner = await self._active_user(user_id)
        if not await self._allowed(viewer, owner, owner.friend_list_visibility):
            raise ForbiddenError("This friend list is private")
        return await friend_service.list_friends(owner.id, limit, offset)

    async def get_groups(
        self, viewer: User, user_id: str, limit: int, offset: int
    ) -> Tuple[List[dict], int]:
        owner = await self._active_user(user_id)
        return await group_service.user_groups(viewer, owner.id, limit, offset)

    async def search(self, user: User, term: str, limit: int) -> List[dict]:
        if not term or not term.strip():
            return []
        exclude = await friends_repository.get_block_related_ids(user.id)
        exclude.add(user.id)
        users = await users_repository.search_users(term, limit, exclude)
        return [user_summary(u) for u in users]

    async def online(self, user: User) -> List[dict]:
        """Users with an open realtime connection, as seen by this user."""
        hidden = await friends_repository.get_block_related_ids(user.id)
        ids = [uid for uid in websocket_manager.online_users if uid != user.id and uid not in hidden]
        users = await users_repository.get_users_by_ids(ids)
        result = []
        for uid in ids:
            if uid in users:
                summary = user_summary(users[uid])
                summary["isOnline"] = True
                result.append(summary)
        return result

    async def block(self, user: User, target_id: str):
        await friend_service.block(user, target_id)

    async def unblock(self, user: User, target_id: str):
        await friend_service.unblock(user, target_id)


user_service = UserService()
