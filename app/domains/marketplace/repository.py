# app/domains/marketplace/repository.py
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, func, or_, select, update

from app.core.database import get_db
from .models import Listing

SORTS = {
    "newest": (Listing.created_at.desc(),),
    "oldest": (Listing.created_at.asc(),),
    "price-low": (Listing.price.asc(), Listing.created_at.desc()),
    "price-high": (Listing.price.desc(), Listing.created_at.desc()),
    "popular": (Listing.views.desc(), Listing.created_at.desc()),
}


async def create_listing(values: Dict) -> Listing:
    async with get_db() as db:
        listing = Listing(id=str(uuid.uuid4()), views=0, **values)
        db.add(listing)
        await db.flush()
        return listing


async def get_listing(listing_id: str) -> Optional[Listing]:
    async with get_db() as db:
        result = await db.execute(select(Listing).filter(Listing.id == listing_id))
        return result.scalar_one_or_none()


async def list_listings(
    limit: int,
    offset: int = 0,
    category: Optional[str] = None,
    condition: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    search: Optional[str] = None,
    status: Optional[str] = "active",
    sort: str = "newest",
    seller_id: Optional[str] = None,
) -> Tuple[List[Listing], int]:
    async with get_db() as db:
        query = select(Listing)
        if seller_id:
            query = query.filter(Listing.seller_id == seller_id)
        if status:
            query = query.filter(Listing.status == status)
        if category:
            query = query.filter(Listing.category == category)
        if condition:
            query = query.filter(Listing.condition == condition)
        if min_price is not None:
            query = query.filter(Listing.price >= min_price)
        if max_price is not None:
            query = query.filter(Listing.price <= max_price)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(func.lower(Listing.title).like(pattern), func.lower(Listing.description).like(pattern))
            )
        total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
        result = await db.execute(
            query.order_by(*SORTS.get(sort, SORTS["newest"])).limit(limit).offset(offset)
        )
        return list(result.scalars().all()), total


async def count_by_category() -> Dict[str, int]:
    async with get_db() as db:
        result = await db.execute(
            select(Listing.category, func.count())
            .filter(Listing.status == "active")
            .group_by(Listing.category)
        )
        return {category: count for category, count in result.all()}


async def increment_views(listing_id: str):
    async with get_db() as db:
        await db.execute(
            update(Listing).where(Listing.id == listing_id).values(views=Listing.views + 1)
        )


async def update_listing(listing_id: str, values: Dict) -> Optional[Listing]:
    async with get_db() as db:
        if values:
            await db.execute(
                update(Listing)
                .where(Listing.id == listing_id)
                .values(**values, updated_at=datetime.utcnow())
            )
        result = await db.execute(select(Listing).filter(Listing.id == listing_id))
        return result.scalar_one_or_none()


async def delete_listing(listing_id: str) -> bool:
    async with get_db() as db:
        result = await db.execute(delete(Listing).where(Listing.id == listing_id))
        return result.rowcount > 0
