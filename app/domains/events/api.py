# app/domains/events/api.py
from typing import Optional

from fastapi import APIRouter, Depends

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.shared.schemas.responses import PageParams, ok
from .schemas import EventCategory, EventCreate, EventSort, EventUpdate
from .service import event_service

router = APIRouter()


@router.get("")
async def list_events(
    category: Optional[EventCategory] = None,
    search: Optional[str] = None,
    sort: EventSort = EventSort.DATE,
    page: PageParams = Depends(),
    user: User = Depends(get_current_user),
):
    events, total = await event_service.list_events(
        user, page.limit, page.offset, category.value if category else None, search, sort.value
    )
    return ok(events, page=page, total=total)


@router.get("/my")
async def my_events(page: PageParams = Depends(), user: User = Depends(get_current_user)):
    """Events the current user organizes or attends"""
    events, total = await event_service.my_events(user, page.limit, page.offset)
    return ok(events, page=page, total=total)


@router.post("", status_code=201)
async def create_event(request: EventCreate, user: User = Depends(get_current_user)):
    return ok(await event_service.create_event(user, request), message="Event created")


@router.get("/{event_id}")
async def get_event(event_id: str, user: User = Depends(get_current_user)):
    return ok(await event_service.get_event(user, event_id))


@router.patch("/{event_id}")
async def update_event(event_id: str, request: EventUpdate, user: User = Depends(get_current_user)):
    return ok(await event_service.update_event(user, event_id, request), message="Event updated")


@router.delete("/{event_id}")
async def delete_event(event_id: str, user: User = Depends(get_current_user)):
    await event_service.delete_event(user, event_id)
    return ok(message="Event deleted")


@router.post("/{event_id}/join")
async def join_event(event_id: str, user: User = Depends(get_current_user)):
    return ok(await event_service.join(user, event_id), message="Joined event")


@router.post("/{event_id}/leave")
async def leave_event(event_id: str, user: User = Depends(get_current_user)):
    return ok(await event_service.leave(user, event_id), message="Left event")


@router.get("/{event_id}/attendees")
async def event_attendees(
    event_id: str, page: PageParams = Depends(), user: User = Depends(get_current_user)
):
    attendees, total = await event_service.attendees(user, event_id, page.limit, page.offset)
    return ok(attendees, page=page, total=total)
