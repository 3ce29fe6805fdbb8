# app/domains/comments/api.py
from fastapi import APIRouter, Depends

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.domains.reactions.schemas import ReactRequest
from app.shared.schemas.responses import PageParams, ok
from .schemas import CommentCreate, CommentUpdate
from .service import comment_service

router = APIRouter()


@router.post("/post/{post_id}", status_code=201)
async def create_comment(
    post_id: str, request: CommentCreate, user: User = Depends(get_current_user)
):
    data = await comment_service.create_comment(user, post_id, request)
    return ok(data, message="Comment added")


@router.get("/post/{post_id}")
async def list_post_comments(
    post_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)
):
    """Top-level comments of a post, oldest first"""
    comments, total = await comment_service.list_for_post(user, post_id, page.limit, page.offset)
    return ok(comments, page=page, total=total)


@router.get("/{comment_id}")
async def get_comment(comment_id: str, user: User = Depends(get_current_user)):
    return ok(await comment_service.get_comment(user, comment_id))


@router.patch("/{comment_id}")
async def update_comment(
    comment_id: str, request: CommentUpdate, user: User = Depends(get_current_user)
):
    data = await comment_service.update_comment(user, comment_id, request.content)
    return ok(data, message="Comment updated")


@router.delete("/{comment_id}")
async def delete_comment(comment_id: str, user: User = Depends(get_current_user)):
    await comment_service.delete_comment(user, comment_id)
    return ok(message="Comment deleted")


@router.post("/{comment_id}/react")
async def react_to_comment(
    comment_id: str, request: ReactRequest, user: User = Depends(get_current_user)
):
    return ok(await comment_service.react(user, comment_id, request.type))


@router.get("/{comment_id}/replies")
async def list_replies(
    comment_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)
):
    replies, total = await comment_service.replies(user, comment_id, page.limit, page.offset)
    return ok(replies, page=page, total=total)
