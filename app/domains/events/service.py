# app/domains/events/service.py
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from app.domains.auth.models import User
from app.domains.auth.repository import get_users_by_ids
from app.domains.auth.schemas import UserSummary
from app.shared.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.shared.utils.logger import get_logger
from . import repository
from .models import Event
from .schemas import AttendeeOut, EventCreate, EventOut, EventUpdate

logger = get_logger(__name__)


def _naive(value: datetime) -> datetime:
    # Columns store naive UTC
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class EventService:
    async def _get(self, event_id: str) -> Event:
        event = await repository.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    async def _owned(self, user: User, event_id: str) -> Event:
        event = await self._get(event_id)
        if event.organizer_id != user.id:
            raise ForbiddenError("Only the organizer can change this event")
        return event

    async def serialize(self, events: Iterable[Event], viewer_id: str) -> List[dict]:
        events = list(events)
        ids = [e.id for e in events]
        organizers = await get_users_by_ids(e.organizer_id for e in events)
        counts = await repository.count_attendees(ids)
        attending = await repository.attending_ids(viewer_id, ids)

        result = []
        for event in events:
            organizer = organizers.get(event.organizer_id)
            count = counts.get(event.id, 0)
            price = event.price or 0
            result.append(
                EventOut(
                    id=event.id,
                    organizer=UserSummary.model_validate(organizer) if organizer else None,
                    title=event.title,
                    description=event.description,
                    starts_at=event.starts_at,
                    location=event.location,
                    category=event.category,
                    image=event.image,
                    images=event.images or [],
                    tags=event.tags or [],
                    max_attendees=event.max_attendees,
                    price=price,
                    is_free=price == 0,
                    attendees_count=count,
                    is_attending=event.id in attending,
                    is_full=event.max_attendees is not None and count >= event.max_attendees,
                    created_at=event.created_at,
                    updated_at=event.updated_at,
                ).dump()
            )
        return result

    async def serialize_one(self, event: Event, viewer_id: str) -> dict:
        return (await self.serialize([event], viewer_id))[0]

    async def create_event(self, user: User, request: EventCreate) -> dict:
        values = request.model_dump()
        values["category"] = request.category.value
        values["starts_at"] = _naive(request.starts_at)
        values["title"] = request.title.strip()
        event = await repository.create_event({"organizer_id": user.id, **values})
        logger.info(f"Event {event.id} created by {user.id}")
        return await self.serialize_one(event, user.id)

    async def list_events(
        self,
        user: User,
        limit: int,
        offset: int,
        category: Optional[str] = None,
        search: Optional[str] = None,
        sort: str = "date",
    ) -> Tuple[List[dict], int]:
        events, total = await repository.list_events(limit, offset, category, search, sort)
        return await self.serialize(events, user.id), total

    async def my_events(self, user: User, limit: int, offset: int) -> Tuple[List[dict], int]:
        events, total = await repository.list_user_events(user.id, limit, offset)
        return await self.serialize(events, user.id), total

    async def get_event(self, user: User, event_id: str) -> dict:
        return await self.serialize_one(await self._get(event_id), user.id)

    async def update_event(self, user: User, event_id: str, request: EventUpdate) -> dict:
        await self._owned(user, event_id)
        values = request.model_dump(exclude_none=True)
        if request.category is not None:
            values["category"] = request.category.value
        if request.starts_at is not None:
            values["starts_at"] = _naive(request.starts_at)
        event = await repository.update_event(event_id, values)
        return await self.serialize_one(event, user.id)

    async def delete_event(self, user: User, event_id: str):
        await self._owned(user, event_id)
        await repository.delete_event(event_id)
        logger.info(f"Event {event_id} deleted by {user.id}")

    async def join(self, user: User, event_id: str) -> dict:
        event = await self._get(event_id)
        if event.id in await repository.attending_ids(user.id, [event.id]):
            raise ConflictError("You are already attending this event")
        try:
            added = await repository.add_attendee(event.id, user.id, event.max_attendees)
        except IntegrityError:
            raise ConflictError("You are already attending this event")
        if not added:
            raise ConflictError("This event is full")
        return await self.serialize_one(event, user.id)

    async def leave(self, user: User, event_id: str) -> dict:
        event = await self._get(event_id)
        if not await repository.remove_attendee(event.id, user.id):
            raise BadRequestError("You are not attending this event")
        return await self.serialize_one(event, user.id)

    async def attendees(self, user: User, event_id: str, limit: int, offset: int) -> Tuple[List[dict], int]:
        event = await self._get(event_id)
        rows, total = await repository.list_attendees(event.id, limit, offset)
        return [
            AttendeeOut(user=UserSummary.model_validate(u), joined_at=a.created_at).dump()
            for a, u in rows
        ], total


event_service = EventService()
