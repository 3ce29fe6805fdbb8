# app/domains/events/repository.py
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import String, cast, delete, func, or_, select, update

from app.core.database import get_db
from app.domains.auth.models import User
from .models import Event, EventAttendee


def _attendance():
    return (
        select(EventAttendee.event_id, func.count().label("attendees"))
        .group_by(EventAttendee.event_id)
        .subquery()
    )


async def create_event(values: Dict) -> Event:
    async with get_db() as db:
        event = Event(id=str(uuid.uuid4()), **values)
        db.add(event)
        await db.flush()
        return event


async def get_event(event_id: str) -> Optional[Event]:
    async with get_db() as db:
        result = await db.execute(select(Event).filter(Event.id == event_id))
        return result.scalar_one_or_none()


async def list_events(
    limit: int,
    offset: int = 0,
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort: str = "date",
) -> Tuple[List[Event], int]:
    attendance = _attendance()
    async with get_db() as db:
        query = select(Event).outerjoin(attendance, attendance.c.event_id == Event.id)
        if category:
            query = query.filter(Event.category == category)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(Event.title).like(pattern),
                    func.lower(Event.description).like(pattern),
                    func.lower(Event.location).like(pattern),
                    func.lower(cast(Event.tags, String)).like(pattern),
                )
            )
        order = {
            "date": (Event.starts_at.asc(),),
            "popular": (func.coalesce(attendance.c.attendees, 0).desc(), Event.starts_at.asc()),
            "newest": (Event.created_at.desc(),),
            "price-low": (Event.price.asc(), Event.starts_at.asc()),
            "price-high": (Event.price.desc(), Event.starts_at.asc()),
        }.get(sort, (Event.starts_at.asc(),))

        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(query.order_by(*order).limit(limit).offset(offset))
        return list(result.scalars().all()), total


async def list_user_events(user_id: str, limit: int, offset: int = 0) -> Tuple[List[Event], int]:
    """Events the user organizes or attends, soonest first."""
    async with get_db() as db:
        attending = select(EventAttendee.event_id).filter(EventAttendee.user_id == user_id)
        query = select(Event).filter(or_(Event.organizer_id == user_id, Event.id.in_(attending)))
        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(query.order_by(Event.starts_at.asc()).limit(limit).offset(offset))
        return list(result.scalars().all()), total


async def update_event(event_id: str, values: Dict) -> Optional[Event]:
    async with get_db() as db:
        if values:
            await db.execute(
                update(Event).where(Event.id == event_id).values(**values, updated_at=datetime.utcnow())
            )
        result = await db.execute(select(Event).filter(Event.id == event_id))
        return result.scalar_one_or_none()


async def delete_event(event_id: str) -> bool:
    async with get_db() as db:
        await db.execute(delete(EventAttendee).where(EventAttendee.event_id == event_id))
        result = await db.execute(delete(Event).where(Event.id == event_id))
        return result.rowcount > 0


async def count_attendees(event_ids: Iterable[str]) -> Dict[str, int]:
    ids = list(set(event_ids))
    if not ids:
        return {}
    async with get_db() as db:
        result = await db.execute(
            select(EventAttendee.event_id, func.count())
            .filter(EventAttendee.event_id.in_(ids))
            .group_by(EventAttendee.event_id)
        )
        return {event_id: count for event_id, count in result.all()}


async def attending_ids(user_id: str, event_ids: Iterable[str]) -> Set[str]:
    ids = list(set(event_ids))
    if not ids:
        return set()
    async with get_db() as db:
        result = await db.execute(
            select(EventAttendee.event_id).filter(
                EventAttendee.user_id == user_id, EventAttendee.event_id.in_(ids)
            )
        )
        return set(result.scalars().all())


async def add_attendee(event_id: str, user_id: str, capacity: Optional[int]) -> bool:
    """Add an attendee unless the event is full. Returns False when full."""
    async with get_db() as db:
        if capacity is not None:
            taken = (
                await db.execute(
                    select(func.count())
                    .select_from(EventAttendee)
                    .filter(EventAttendee.event_id == event_id)
                )
            ).scalar_one()
            if taken >= capacity:
                return False
        db.add(EventAttendee(id=str(uuid.uuid4()), event_id=event_id, user_id=user_id))
        await db.flush()
        return True


async def remove_attendee(event_id: str, user_id: str) -> bool:
    async with get_db() as db:
        result = await db.execute(
            delete(EventAttendee).where(
                EventAttendee.event_id == event_id, EventAttendee.user_id == user_id
            )
        )
        return result.rowcount > 0


async def list_attendees(
    event_id: str, limit: int, offset: int = 0
) -> Tuple[List[Tuple[EventAttendee, User]], int]:
    async with get_db() as db:
        total = (
            await db.execute(
                select(func.count()).select_from(EventAttendee).filter(EventAttendee.event_id == event_id)
            )
        ).scalar_one()
        result = await db.execute(
            select(EventAttendee, User)
            .join(User, User.id == EventAttendee.user_id)
            .filter(EventAttendee.event_id == event_id)
            .order_by(EventAttendee.created_at)
            .limit(limit)
            .offset(offset)
        )
        return [(attendee, user) for attendee, user in result.all()], total
