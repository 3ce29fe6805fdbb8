# app/domains/notifications/api.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.shared.schemas.responses import PageParams, ok
from .schemas import MarkReadRequest
from .service import notification_service

router = APIRouter()


@router.get("")
async def list_notifications(
    is_read: Optional[bool] = Query(default=None, alias="isRead"),
    page: PageParams = Depends(),
    user: User = Depends(get_current_user),
):
    items, total = await notification_service.get_notifications(
        user.id, is_read, page.limit, page.offset
    )
    return ok(items, page=page, total=total)


@router.get("/unread-count")
async def unread_count(user: User = Depends(get_current_user)):
    return ok({"count": await notification_service.unread_count(user.id)})


@router.patch("/mark-read")
async def mark_read(request: MarkReadRequest, user: User = Depends(get_current_user)):
    updated = await notification_service.mark_read(
        user.id, request.notification_ids, request.mark_all
    )
    return ok({"updated": updated}, message="Notifications marked as read")


@router.delete("/{notification_id}")
async def delete_notification(notification_id: str, user: User = Depends(get_current_user)):
    await notification_service.delete(user.id, notification_id)
    return ok(message="Notification deleted")
