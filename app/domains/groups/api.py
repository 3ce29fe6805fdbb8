# app/domains/groups/api.py
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.shared.schemas.responses import PageParams, ok
from .schemas import GroupCreate, GroupPrivacy, GroupUpdate, JoinRequest
from .service import group_service

router = APIRouter()


@router.post("/create", status_code=201)
async def create_group(request: GroupCreate, user: User = Depends(get_current_user)):
    return ok(await group_service.create_group(user, request), message="Group created")


@router.get("")
async def list_groups(
    category: Optional[str] = None,
    privacy: Optional[GroupPrivacy] = None,
    search: Optional[str] = None,
    page: PageParams = Depends(),
    user: User = Depends(get_current_user),
):
    groups, total = await group_service.list_groups(
        user, page.limit, page.offset, category, privacy.value if privacy else None, search
    )
    return ok(groups, page=page, total=total)


@router.get("/user")
async def my_groups(page: PageParams = Depends(), user: User = Depends(get_current_user)):
    """Groups the current user belongs to"""
    groups, total = await group_service.user_groups(user, user.id, page.limit, page.offset)
    return ok(groups, page=page, total=total)


@router.get("/suggestions")
async def group_suggestions(
    limit: int = Query(default=10, ge=1, le=50), user: User = Depends(get_current_user)
):
    return ok(await group_service.suggestions(user, limit))


@router.get("/{group_id}")
async def get_group(group_id: str, user: User = Depends(get_current_user)):
    return ok(await group_service.get_group(user, group_id))


@router.patch("/{group_id}")
async def update_group(group_id: str, request: GroupUpdate, user: User = Depends(get_current_user)):
    return ok(await group_service.update_group(user, group_id, request), message="Group updated")


@router.delete("/{group_id}")
async def delete_group(group_id: str, user: User = Depends(get_current_user)):
    await group_service.delete_group(user, group_id)
    return ok(message="Group deleted")


@router.post("/{group_id}/join")
async def join_group(
    group_id: str,
    request: Optional[JoinRequest] = Body(default=None),
    user: User = Depends(get_current_user),
):
    data = await group_service.join(user, group_id, request.message if request else None)
    message = "Join request sent" if data["status"] == "pending" else "Joined group"
    return ok(data, message=message)


@router.post("/{group_id}/leave")
async def leave_group(group_id: str, user: User = Depends(get_current_user)):
    await group_service.leave(user, group_id)
    return ok(message="Left group")


@router.get("/{group_id}/posts")
async def group_posts(group_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)):
    posts, total = await group_service.posts(user, group_id, page.limit, page.offset)
    return ok(posts, page=page, total=total)


@router.get("/{group_id}/members")
async def group_members(
    group_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)
):
    members, total = await group_service.members(user, group_id, page.limit, page.offset)
    return ok(members, page=page, total=total)


@router.get("/{group_id}/requests")
async def group_join_requests(
    group_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)
):
    requests, total = await group_service.join_requests(user, group_id, page.limit, page.offset)
    return ok(requests, page=page, total=total)


@router.post("/{group_id}/requests/{user_id}/approve")
async def approve_join_request(group_id: str, user_id: str, user: User = Depends(get_current_user)):
    await group_service.approve_request(user, group_id, user_id)
    return ok(message="Join request approved")


@router.post("/{group_id}/requests/{user_id}/reject")
async def reject_join_request(group_id: str, user_id: str, user: User = Depends(get_current_user)):
    await group_service.reject_request(user, group_id, user_id)
    return ok(message="Join request rejected")


@router.post("/{group_id}/moderators/{user_id}")
async def add_moderator(group_id: str, user_id: str, user: User = Depends(get_current_user)):
    await group_service.add_moderator(user, group_id, user_id)
    return ok(message="Moderator added")


@router.delete("/{group_id}/moderators/{user_id}")
async def remove_moderator(group_id: str, user_id: str, user: User = Depends(get_current_user)):
    await group_service.remove_moderator(user, group_id, user_id)
    return ok(message="Moderator removed")


@router.post("/{group_id}/invite/{user_id}")
async def invite_to_group(group_id: str, user_id: str, user: User = Depends(get_current_user)):
    await group_service.invite(user, group_id, user_id)
    return ok(message="Invitation sent")
