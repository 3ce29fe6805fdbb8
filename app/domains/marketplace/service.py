# app/domains/marketplace/service.py
from typing import Iterable, List, Optional, Tuple

from app.domains.auth.models import User
from app.domains.auth.repository import get_users_by_ids
from app.domains.auth.schemas import UserSummary
from app.domains.messages.schemas import SendMessageRequest
from app.domains.messages.service import message_service
from app.shared.exceptions import BadRequestError, ForbiddenError, NotFoundError
from app.shared.utils.logger import get_logger
from . import repository
from .models import Listing
from .schemas import CATEGORY_LABELS, ListingCreate, ListingOut, ListingStatus, ListingUpdate

logger = get_logger(__name__)


class MarketplaceService:
    async def _get(self, listing_id: str) -> Listing:
        listing = await repository.get_listing(listing_id)
        if not listing:
            raise NotFoundError("Listing not found")
        return listing

    async def _owned(self, user: User, listing_id: str) -> Listing:
        listing = await self._get(listing_id)
        if listing.seller_id != user.id:
            raise ForbiddenError("You can only manage your own listings")
        return listing

    async def serialize(self, listings: Iterable[Listing]) -> List[dict]:
        listings = list(listings)
        sellers = await get_users_by_ids(item.seller_id for item in listings)
        result = []
        for listing in listings:
            seller = sellers.get(listing.seller_id)
            result.append(
                ListingOut(
                    id=listing.id,
                    seller=UserSummary.model_validate(seller) if seller else None,
                    title=listing.title,
                    description=listing.description,
                    price=listing.price,
                    category=listing.category,
                    condition=listing.condition,
                    images=listing.images or [],
                    location=listing.location,
                    status=listing.status,
                    views=listing.views or 0,
                    created_at=listing.created_at,
                    updated_at=listing.updated_at,
                ).dump()
            )
        return result

    async def create_listing(self, user: User, request: ListingCreate) -> dict:
        listing = await repository.create_listing(
            {
                "seller_id": user.id,
                "title": request.title.strip(),
                "description": request.description,
                "price": request.price,
                "category": request.category.value,
                "condition": request.condition.value,
                "images": request.images,
                "location": request.location,
                "status": ListingStatus.ACTIVE.value,
            }
        )
        logger.info(f"Listing {listing.id} created by {user.id}")
        return (await self.serialize([listing]))[0]

    async def list_listings(self, limit: int, offset: int, **filters) -> Tuple[List[dict], int]:
        listings, total = await repository.list_listings(limit, offset, **filters)
        return await self.serialize(listings), total

    async def my_listings(self, user: User, limit: int, offset: int) -> Tuple[List[dict], int]:
        listings, total = await repository.list_listings(
            limit, offset, status=None, seller_id=user.id
        )
        return await self.serialize(listings), total

    async def categories(self) -> List[dict]:
        counts = await repository.count_by_category()
        return [
            {"key": category.value, "label": label, "count": counts.get(category.value, 0)}
            for category, label in CATEGORY_LABELS.items()
        ]

    async def get_listing(self, user: User, listing_id: str) -> dict:
        listing = await self._get(listing_id)
        if listing.seller_id != user.id:
            await repository.increment_views(listing.id)
            listing = await self._get(listing_id)
        return (await self.serialize([listing]))[0]

    async def update_listing(self, user: User, listing_id: str, request: ListingUpdate) -> dict:
        await self._owned(user, listing_id)
        values = request.model_dump(exclude_none=True)
        for field in ("category", "condition", "status"):
            if field in values:
                values[field] = getattr(request, field).value
        listing = await repository.update_listing(listing_id, values)
        return (await self.serialize([listing]))[0]

    async def delete_listing(self, user: User, listing_id: str):
        await self._owned(user, listing_id)
        await repository.delete_listing(listing_id)
        logger.info(f"Listing {listing_id} deleted by {user.id}")

    async def contact_seller(self, user: User, listing_id: str, message: Optional[str]) -> dict:
        """Deliver a direct message about the listing to its seller."""
        listing = await self._get(listing_id)
        if listing.seller_id == user.id:
            raise BadRequestError("You cannot contact yourself about your own listing")
        if listing.status == ListingStatus.SOLD.value:
            raise BadRequestError("This listing has already been sold")

        content = f"[{listing.title}] {message.strip()}"
        return await message_service.send_message(
            user, listing.seller_id, SendMessageRequest(content=content[:1000])
        )


marketplace_service = MarketplaceService()
