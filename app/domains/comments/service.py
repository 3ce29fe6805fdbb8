# app/domains/comments/service.py
from typing import Iterable, List, Optional, Tuple

from app.domains.auth.models import User
from app.domains.auth.repository import get_users_by_ids
from app.domains.auth.schemas import UserSummary
from app.domains.notifications.schemas import NotificationType
from app.domains.notifications.service import notification_service
from app.domains.posts import repository as posts_repository
from app.domains.posts.service import post_service
from app.domains.reactions import ReactionTarget, ReactionType, reaction_service
from app.domains.reactions.service import summarize
from app.shared.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.shared.utils.logger import get_logger
from . import repository
from .models import Comment
from .schemas import CommentCreate, CommentOut

logger = get_logger(__name__)


class CommentService:
    async def _visible_comment(self, comment_id: str, viewer_id: str) -> Comment:
        comment = await repository.get_comment(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        await post_service.get_visible_post(comment.post_id, viewer_id)
        return comment

    async def serialize(self, comments: Iterable[Comment], viewer_id: str) -> List[dict]:
        comments = list(comments)
        ids = [c.id for c in comments]
        users = await get_users_by_ids(c.author_id for c in comments)
        reactions = await reaction_service.summaries(ReactionTarget.COMMENT, ids, viewer_id)
        replies = await repository.count_replies(ids)

        result = []
        for comment in comments:
            author = users.get(comment.author_id)
            summary = reactions.get(comment.id) or summarize([], viewer_id)
            result.append(
                CommentOut(
                    id=comment.id,
                    post=comment.post_id,
                    author=UserSummary.model_validate(author) if author else None,
                    content=comment.content,
                    image=comment.image,
                    parent_comment=comment.parent_comment_id,
                    reactions=summary["reactions"],
                    total_reactions=summary["totalReactions"],
                    user_reaction=summary["userReaction"],
                    replies_count=replies.get(comment.id, 0),
                    is_edited=bool(comment.is_edited),
                    edited_at=comment.edited_at,
                    created_at=comment.created_at,
                    updated_at=comment.updated_at,
                ).dump()
            )
        return result

    async def create_comment(self, user: User, post_id: str, request: CommentCreate) -> dict:
        post = await post_service.get_visible_post(post_id, user.id)

        content = (request.content or "").strip()
        if not content and not request.image:
            raise BadRequestError("Comment must have content or an image")

        parent = None
        if request.parent_comment_id:
            parent = await repository.get_comment(request.parent_comment_id)
            if not parent or parent.post_id != post.id:
                raise NotFoundError("Parent comment not found")
            if parent.parent_comment_id:
                # A reply to a reply joins the top-level thread
                parent = await repository.get_comment(parent.parent_comment_id)
                if not parent:
                    raise NotFoundError("Parent comment not found")

        comment = await repository.create_comment(
            {
                "author_id": user.id,
                "post_id": post.id,
                "content": content or None,
                "image": request.image,
                "parent_comment_id": parent.id if parent else None,
            }
        )
        await posts_repository.adjust_counter(post.id, "comments_count", 1)

        await notification_service.notify(
            post.author_id,
            user.id,
            NotificationType.COMMENT,
            f"{user.name} commented on your post",
            related_post_id=post.id,
            related_comment_id=comment.id,
        )
        if parent and parent.author_id != post.author_id:
            await notification_service.notify(
                parent.author_id,
                user.id,
                NotificationType.COMMENT,
                f"{user.name} replied to your comment",
                related_post_id=post.id,
                related_comment_id=comment.id,
            )

        logger.info(f"Comment {comment.id} on post {post.id} by {user.id}")
        return (await self.serialize([comment], user.id))[0]

    async def list_for_post(
        self, user: User, post_id: str, limit: int, offset: int
    ) -> Tuple[List[dict], int]:
        post = await post_service.get_visible_post(post_id, user.id)
        comments, total = await repository.list_top_level(post.id, limit, offset)
        return await self.serialize(comments, user.id), total

    async def get_comment(self, user: User, comment_id: str) -> dict:
        comment = await self._visible_comment(comment_id, user.id)
        return (await self.serialize([comment], user.id))[0]

    async def replies(
        self, user: User, comment_id: str, limit: int, offset: int
    ) -> Tuple[List[dict], int]:
        comment = await self._visible_comment(comment_id, user.id)
        replies, total = await repository.list_replies(comment.id, limit, offset)
        return await self.serialize(replies, user.id), total

    async def update_comment(self, user: User, comment_id: str, content: str) -> dict:
        comment = await repository.get_comment(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        if comment.author_id != user.id:
            raise ForbiddenError("You can only edit your own comments")
        content = (content or "").strip()
        if not content and not comment.image:
            raise BadRequestError("Comment must have content or an image")
        comment = await repository.update_comment(comment_id, {"content": content or None})
        return (await self.serialize([comment], user.id))[0]

    async def delete_comment(self, user: User, comment_id: str):
        comment = await repository.get_comment(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")

        post = await posts_repository.get_post(comment.post_id)
        if comment.author_id != user.id and (not post or post.author_id != user.id):
            raise ForbiddenError("You can only delete your own comments")

        deleted = await repository.delete_comment(comment_id)
        await reaction_service.delete_for(ReactionTarget.COMMENT, deleted)
        if post and deleted:
            await posts_repository.adjust_counter(post.id, "comments_count", -len(deleted))
        logger.info(f"Comment {comment_id} deleted by {user.id} ({len(deleted)} rows)")

    async def react(self, user: User, comment_id: str, reaction_type: ReactionType) -> dict:
        comment = await self._visible_comment(comment_id, user.id)
        summary = await reaction_service.react(
            user.id, ReactionTarget.COMMENT, comment.id, reaction_type
        )
        if summary.pop("created"):
            await notification_service.notify(
                comment.author_id,
                user.id,
                NotificationType.LIKE,
                f"{user.name} reacted to your comment",
                related_post_id=comment.post_id,
                related_comment_id=comment.id,
            )
        return summary


comment_service = CommentService()
