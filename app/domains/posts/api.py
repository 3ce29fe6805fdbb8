# app/domains/posts/api.py
from typing import Optional

from fastapi import APIRouter, Body, Depends

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.domains.reactions.schemas import ReactRequest
from app.shared.schemas.responses import PageParams, ok
from .schemas import PostCreate, PostUpdate, ShareRequest
from .service import post_service

router = APIRouter()


@router.post("", status_code=201)
async def create_post(request: PostCreate, user: User = Depends(get_current_user)):
    return ok(await post_service.create_post(user, request), message="Post created")


@router.get("")
async def get_feed(
    sort: str = "newest",
    search: Optional[str] = None,
    page: PageParams = Depends(),
    user: User = Depends(get_current_user),
):
    """News feed for the current user"""
    posts, total = await post_service.get_feed(user, page.limit, page.offset, sort, search)
    return ok(posts, page=page, total=total)


@router.get("/user/{user_id}")
async def get_user_posts(
    user_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)
):
    posts, total = await post_service.get_user_posts(user, user_id, page.limit, page.offset)
    return ok(posts, page=page, total=total)


@router.get("/saved")
async def get_saved_posts(page: PageParams = Depends(), user: User = Depends(get_current_user)):
    """Posts the current user has saved, most recently saved first"""
    posts, total = await post_service.saved_posts(user, page.limit, page.offset)
    return ok(posts, page=page, total=total)


@router.get("/{post_id}")
async def get_post(post_id: str, user: User = Depends(get_current_user)):
    return ok(await post_service.get_post(user, post_id))


@router.patch("/{post_id}")
async def update_post(post_id: str, request: PostUpdate, user: User = Depends(get_current_user)):
    return ok(await post_service.update_post(user, post_id, request), message="Post updated")


@router.delete("/{post_id}")
async def delete_post(post_id: str, user: User = Depends(get_current_user)):
    await post_service.delete_post(user, post_id)
    return ok(message="Post deleted")


@router.post("/{post_id}/react")
async def react_to_post(post_id: str, request: ReactRequest, user: User = Depends(get_current_user)):
    return ok(await post_service.react(user, post_id, request.type))


@router.get("/{post_id}/reactions")
async def get_post_reactions(post_id: str, user: User = Depends(get_current_user)):
    return ok(await post_service.reactions(user, post_id))


@router.post("/{post_id}/share", status_code=201)
async def share_post(
    post_id: str,
    request: Optional[ShareRequest] = Body(default=None),
    user: User = Depends(get_current_user),
):
    data = await post_service.share(user, post_id, request or ShareRequest())
    return ok(data, message="Post shared")


@router.post("/{post_id}/save", status_code=201)
async def save_post(post_id: str, user: User = Depends(get_current_user)):
    return ok(await post_service.save(user, post_id), message="Post saved")


@router.delete("/{post_id}/save")
async def unsave_post(post_id: str, user: User = Depends(get_current_user)):
    await post_service.unsave(user, post_id)
    return ok(message="Post removed from saved")
