# app/domains/users/api.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.shared.schemas.responses import PageParams, ok
from .schemas import ProfileUpdate
from .service import user_service

router = APIRouter()


@router.patch("/me")
async def update_profile(request: ProfileUpdate, user: User = Depends(get_current_user)):
    data = await user_service.update_profile(user, request)
    return ok(data, message="Profile updated")


@router.get("/search")
async def search_users(
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    limit: int = Query(default=10, ge=1, le=50),
    user: User = Depends(get_current_user),
):
    return ok(await user_service.search(user, search_term or "", limit))


@router.get("/online")
async def online_users(user: User = Depends(get_current_user)):
    return ok(await user_service.online(user))


@router.post("/block/{user_id}")
async def block_user(user_id: str, user: User = Depends(get_current_user)):
    await user_service.block(user, user_id)
    return ok(message="User blocked")


@router.post("/unblock/{user_id}")
async def unblock_user(user_id: str, user: User = Depends(get_current_user)):
    await user_service.unblock(user, user_id)
    return ok(message="User unblocked")


@router.get("/{user_id}")
async def get_profile(user_id: str, user: User = Depends(get_current_user)):
    return ok(await user_service.get_profile(user, user_id))


@router.get("/{user_id}/friends")
async def get_user_friends(
    user_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)
):
    friends, total = await user_service.get_friends(user, user_id, page.limit, page.offset)
    return ok(friends, page=page, total=total)


@router.get("/{user_id}/groups")
async def get_user_groups(
    user_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)
):
    groups, total = await user_service.get_groups(user, user_id, page.limit, page.offset)
    return ok(groups, page=page, total=total)
