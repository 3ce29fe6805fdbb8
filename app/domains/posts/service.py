# app/domains/posts/service.py
"""
Posts, the news feed, sharing and saved posts.

A post is visible to its author, to everyone when public and to the
author's friends when friends-only. Posts made inside a private group are
visible to the group's members only. Sharing is flattened: sharing a share
references the original post, and a share is never more visible than the
original. A viewer who cannot see the original gets the share with the
original withheld.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy.exc import IntegrityError

from app.domains.auth.models import User
from app.domains.auth.repository import get_user_by_id, get_users_by_ids
from app.domains.auth.schemas import UserSummary
from app.domains.friends import repository as friends_repository
from app.domains.notifications.schemas import NotificationType
from app.domains.notifications.service import notification_service
from app.domains.reactions import ReactionTarget, ReactionType, reaction_service
from app.domains.reactions.service import summarize
from app.shared.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.shared.utils.logger import get_logger
from . import repository
from .models import Post
from .schemas import PostCreate, PostOut, PostType, PostUpdate, ShareRequest

logger = get_logger(__name__)

VISIBILITY_RANK = {"private": 0, "friends": 1, "public": 2}


class PostService:
    async def visible_ids(self, posts: Iterable[Post], viewer_id: str) -> Set[str]:
        """Ids of the given posts the viewer may see, checked in a few batched queries."""
        posts = list(posts)
        visible = {p.id for p in posts if p.author_id == viewer_id}
        others = [p for p in posts if p.author_id != viewer_id]
        if not others:
            return visible

        blocked = await friends_repository.get_block_related_ids(viewer_id)
        others = [p for p in others if p.author_id not in blocked]

        group_ids = {p.group_id for p in others if p.group_id}
        groups: Dict = {}
        memberships: Dict = {}
        if group_ids:
            from app.domains.groups import repository as groups_repository

            groups = await groups_repository.get_groups_by_ids(group_ids)
            memberships = await groups_repository.get_memberships(viewer_id, group_ids)

        friends: Set[str] = set()
        if any(not p.group_id and p.visibility == "friends" for p in others):
            friends = set(await friends_repository.get_friend_ids(viewer_id))

        for post in others:
            if post.group_id:
                group = groups.get(post.group_id)
                if not group or not group.is_active:
                    continue
                if group.privacy != "private" or post.group_id in memberships:
                    visible.add(post.id)
            elif post.visibility == "public":
                visible.add(post.id)
            elif post.visibility == "friends" and post.author_id in friends:
                visible.add(post.id)
        return visible

    async def can_view(self, post: Post, viewer_id: str) -> bool:
        return post.id in await self.visible_ids([post], viewer_id)

    async def get_visible_post(self, post_id: str, viewer_id: str) -> Post:
        post = await repository.get_post(post_id)
        if not post:
            raise NotFoundError("Post not found")
        if not await self.can_view(post, viewer_id):
            raise ForbiddenError("You do not have permission to view this post")
        return post

    async def serialize(
        self,
        posts: Iterable[Post],
        viewer_id: str,
        saved_at: Optional[Dict[str, datetime]] = None,
    ) -> List[dict]:
        posts = list(posts)
        shared_ids = {p.shared_post_id for p in posts if p.shared_post_id}
        shared = await repository.get_posts_by_ids(shared_ids)
        readable = await self.visible_ids(shared.values(), viewer_id)
        everything = posts + [p for p in shared.values() if p.id in readable]

        users = await get_users_by_ids(p.author_id for p in everything)
        reactions = await reaction_service.summaries(
            ReactionTarget.POST, [p.id for p in everything], viewer_id
        )
        saved = await repository.get_saved_ids(viewer_id, [p.id for p in everything])
        saved_at = saved_at or {}

        def build(post: Post, nested: Optional[PostOut], unavailable: bool = False) -> PostOut:
            author = users.get(post.author_id)
            summary = reactions.get(post.id) or summarize([], viewer_id)
            return PostOut(
                id=post.id,
                author=UserSummary.model_validate(author) if author else None,
                content=post.content,
                images=post.images or [],
                type=post.type,
                visibility=post.visibility,
                tags=post.tags or [],
                location=post.location,
                group=post.group_id,
                shared_post=nested,
                shared_post_unavailable=unavailable,
                reactions=summary["reactions"],
                total_reactions=summary["totalReactions"],
                user_reaction=summary["userReaction"],
                comments_count=post.comments_count or 0,
                shares_count=post.shares_count or 0,
                is_edited=bool(post.is_edited),
                edited_at=post.edited_at,
                is_saved=post.id in saved,
                saved_at=saved_at.get(post.id),
                created_at=post.created_at,
                updated_at=post.updated_at,
            )

        result = []
        for post in posts:
            original = shared.get(post.shared_post_id) if post.shared_post_id else None
            if original is not None and original.id not in readable:
                result.append(build(post, None, unavailable=True).dump())
                continue
            result.append(build(post, build(original, None) if original else None).dump())
        return result

    async def serialize_one(self, post: Post, viewer_id: str) -> dict:
        return (await self.serialize([post], viewer_id))[0]

    async def create_post(self, user: User, request: PostCreate) -> dict:
        content = (request.content or "").strip()
        if not content and not request.images:
            raise BadRequestError("Post must have content or images")

        if request.group_id:
            from app.domains.groups import repository as groups_repository

            group = await groups_repository.get_group(request.group_id)
            if not group or not group.is_active:
                raise NotFoundError("Group not found")
            if not await groups_repository.get_membership(group.id, user.id):
                raise ForbiddenError("Only group members can post in this group")

        visibility = request.visibility.value if request.visibility else user.post_visibility
        post = await repository.create_post(
            {
                "author_id": user.id,
                "content": content or None,
                "images": request.images,
                "type": PostType.IMAGE.value if request.images else PostType.TEXT.value,
                "visibility": visibility,
                "tags": request.tags,
                "location": request.location,
                "group_id": request.group_id,
                "is_edited": False,
            }
        )
        logger.info(f"Post {post.id} created by {user.id}")
        return await self.serialize_one(post, user.id)

    async def get_feed(
        self, user: User, limit: int, offset: int, sort: str = "newest", search: Optional[str] = None
    ) -> Tuple[List[dict], int]:
        friend_ids = await friends_repository.get_friend_ids(user.id)
        excluded = await friends_repository.get_block_related_ids(user.id)
        posts, total = await repository.get_feed(
            user.id, friend_ids, excluded, limit, offset, sort, search
        )
        return await self.serialize(posts, user.id), total

    async def get_user_posts(
        self, viewer: User, author_id: str, limit: int, offset: int
    ) -> Tuple[List[dict], int]:
        author = await get_user_by_id(author_id)
        if not author or not author.is_active:
            raise NotFoundError("User not found")

        if viewer.id == author_id:
            visibilities = ["public", "friends", "private"]
        else:
            if await friends_repository.is_blocked_between(viewer.id, author_id):
                raise ForbiddenError("You cannot view this user's posts")
            visibilities = ["public"]
            if await friends_repository.are_friends(viewer.id, author_id):
                visibilities.append("friends")

        posts, total = await repository.get_user_posts(author_id, visibilities, limit, offset)
        return await self.serialize(posts, viewer.id), total

    async def get_post(self, user: User, post_id: str) -> dict:
        post = await self.get_visible_post(post_id, user.id)
        return await self.serialize_one(post, user.id)

    async def update_post(self, user: User, post_id: str, request: PostUpdate) -> dict:
        post = await repository.get_post(post_id)
        if not post:
            raise NotFoundError("Post not found")
        if post.author_id != user.id:
            raise ForbiddenError("You can only edit your own posts")

        values: Dict = {}
        for field in ("content", "images", "tags", "location"):
            value = getattr(request, field)
            if value is not None:
                values[field] = value
        if request.visibility is not None:
            values["visibility"] = request.visibility.value
        if "images" in values and post.type != PostType.SHARED.value:
            values["type"] = PostType.IMAGE.value if values["images"] else PostType.TEXT.value

        content = values.get("content", post.content)
        images = values.get("images", post.images)
        if not (content or "").strip() and not images and post.type != PostType.SHARED.value:
            raise BadRequestError("Post must have content or images")

        if "visibility" in values and post.shared_post_id:
            original = await repository.get_post(post.shared_post_id)
            if original:
                self._check_share_visibility(values["visibility"], original)

        post = await repository.update_post(post_id, values)
        return await self.serialize_one(post, user.id)

    async def delete_post(self, user: User, post_id: str):
        post = await repository.get_post(post_id)
        if not post:
            raise NotFoundError("Post not found")
        if post.author_id != user.id:
            raise ForbiddenError("You can only delete your own posts")

        from app.domains.comments import repository as comments_repository

        comment_ids = await comments_repository.delete_for_post(post_id)
        await reaction_service.delete_for(ReactionTarget.COMMENT, comment_ids)
        await reaction_service.delete_for(ReactionTarget.POST, [post_id])
        await repository.delete_post(post_id)
        if post.shared_post_id:
            await repository.adjust_counter(post.shared_post_id, "shares_count", -1)
        logger.info(f"Post {post_id} deleted by {user.id}")

    async def react(self, user: User, post_id: str, reaction_type: ReactionType) -> dict:
        post = await self.get_visible_post(post_id, user.id)
        summary = await reaction_service.react(user.id, ReactionTarget.POST, post.id, reaction_type)
        if summary.pop("created"):
            await notification_service.notify(
                post.author_id,
                user.id,
                NotificationType.LIKE,
                f"{user.name} reacted to your post",
                related_post_id=post.id,
            )
        return summary

    async def reactions(self, user: User, post_id: str) -> dict:
        post = await self.get_visible_post(post_id, user.id)
        return await reaction_service.detailed(ReactionTarget.POST, post.id)

    @staticmethod
    def _check_share_visibility(visibility: str, original: Post):
        if VISIBILITY_RANK[visibility] > VISIBILITY_RANK.get(original.visibility, 0):
            raise BadRequestError(
                f"A share cannot be more visible than the original post ({original.visibility})"
            )

    async def share(self, user: User, post_id: str, request: ShareRequest) -> dict:
        post = await self.get_visible_post(post_id, user.id)

        original = post
        if post.shared_post_id:
            original = await repository.get_post(post.shared_post_id)
            if not original:
                raise NotFoundError("Original post no longer exists")
            if not await self.can_view(original, user.id):
                raise ForbiddenError("You do not have permission to share this post")

        if request.visibility:
            visibility = request.visibility.value
            self._check_share_visibility(visibility, original)
        else:
            # Default audience narrowed to the original's
            visibility = min(
                user.post_visibility,
                original.visibility,
                key=lambda v: VISIBILITY_RANK.get(v, 0),
            )

        content = (request.content or "").strip()
        shared = await repository.create_post(
            {
                "author_id": user.id,
                "content": content or None,
                "images": [],
                "type": PostType.SHARED.value,
                "visibility": visibility,
                "tags": [],
                "shared_post_id": original.id,
                "is_edited": False,
            }
        )
        await repository.adjust_counter(original.id, "shares_count", 1)
        await notification_service.notify(
            original.author_id,
            user.id,
            NotificationType.POST_SHARE,
            f"{user.name} shared your post",
            related_post_id=original.id,
        )
        logger.info(f"Post {original.id} shared by {user.id} as {shared.id}")
        return await self.serialize_one(shared, user.id)

    async def save(self, user: User, post_id: str) -> dict:
        post = await self.get_visible_post(post_id, user.id)
        try:
            await repository.save_post(user.id, post.id)
        except IntegrityError:
            raise ConflictError("Post is already saved")
        logger.info(f"Post {post.id} saved by {user.id}")
        return await self.serialize_one(post, user.id)

    async def unsave(self, user: User, post_id: str):
        if not await repository.unsave_post(user.id, post_id):
            raise NotFoundError("Saved post not found")

    async def saved_posts(self, user: User, limit: int, offset: int) -> Tuple[List[dict], int]:
        rows, total = await repository.get_saved_posts(user.id, limit, offset)
        posts = [post for post, _ in rows]
        # Saved posts whose audience has since excluded the user are skipped
        visible = await self.visible_ids(posts, user.id)
        saved_at = {post.id: at for post, at in rows}
        return (
            await self.serialize([p for p in posts if p.id in visible], user.id, saved_at),
            total,
        )


post_service = PostService()
