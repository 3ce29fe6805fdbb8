# app/domains/friends/api.py
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.shared.schemas.responses import PageParams, ok
from .schemas import FriendRequestCreate
from .service import friend_service

router = APIRouter()


@router.post("/request/{user_id}", status_code=201)
async def send_friend_request(
    user_id: str,
    request: Optional[FriendRequestCreate] = Body(default=None),
    user: User = Depends(get_current_user),
):
    message = request.message if request else None
    data = await friend_service.send_request(user, user_id, message)
    return ok(data, message="Friend request sent")


@router.post("/accept/{request_id}")
async def accept_friend_request(request_id: str, user: User = Depends(get_current_user)):
    data = await friend_service.accept_request(user, request_id)
    return ok(data, message="Friend request accepted")


@router.post("/reject/{request_id}")
async def reject_friend_request(request_id: str, user: User = Depends(get_current_user)):
    data = await friend_service.reject_request(user, request_id)
    return ok(data, message="Friend request rejected")


@router.delete("/request/{request_id}")
async def cancel_friend_request(request_id: str, user: User = Depends(get_current_user)):
    await friend_service.cancel_request(user, request_id)
    return ok(message="Friend request cancelled")


@router.delete("/remove/{user_id}")
async def remove_friend(user_id: str, user: User = Depends(get_current_user)):
    await friend_service.remove_friend(user, user_id)
    return ok(message="Friend removed")


@router.get("/list")
async def list_friends(
    search_term: Optional[str] = Query(default=None, alias="searchTerm"),
    page: PageParams = Depends(),
    user: User = Depends(get_current_user),
):
    friends, total = await friend_service.list_friends(user.id, page.limit, page.offset, search_term)
    return ok(friends, page=page, total=total)


@router.get("/requests")
async def received_requests(page: PageParams = Depends(), user: User = Depends(get_current_user)):
    requests, total = await friend_service.list_requests(user, "received", page.limit, page.offset)
    return ok(requests, page=page, total=total)


@router.get("/requests/sent")
async def sent_requests(page: PageParams = Depends(), user: User = Depends(get_current_user)):
    requests, total = await friend_service.list_requests(user, "sent", page.limit, page.offset)
    return ok(requests, page=page, total=total)


@router.get("/suggestions")
async def suggestions(
    limit: int = Query(default=10, ge=1, le=50),
    user: User = Depends(get_current_user),
):
    return ok(await friend_service.suggestions(user, limit))
