# app/domains/marketplace/api.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.domains.auth.dependencies import get_current_user
from app.domains.auth.models import User
from app.shared.schemas.responses import PageParams, ok
from .schemas import (
    ContactSellerRequest,
    ListingCategory,
    ListingCondition,
    ListingCreate,
    ListingSort,
    ListingStatus,
    ListingUpdate,
)
from .service import marketplace_service

router = APIRouter()


@router.get("/listings")
async def list_listings(
    category: Optional[ListingCategory] = None,
    condition: Optional[ListingCondition] = None,
    min_price: Optional[float] = Query(default=None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(default=None, alias="maxPrice", ge=0),
    search: Optional[str] = None,
    status: ListingStatus = ListingStatus.ACTIVE,
    sort: ListingSort = ListingSort.NEWEST,
    page: PageParams = Depends(),
    user: User = Depends(get_current_user),
):
    listings, total = await marketplace_service.list_listings(
        page.limit,
        page.offset,
        category=category.value if category else None,
        condition=condition.value if condition else None,
        min_price=min_price,
        max_price=max_price,
        search=search,
        status=status.value,
        sort=sort.value,
    )
    return ok(listings, page=page, total=total)


@router.get("/listings/my")
async def my_listings(page: PageParams = Depends(), user: User = Depends(get_current_user)):
    listings, total = await marketplace_service.my_listings(user, page.limit, page.offset)
    return ok(listings, page=page, total=total)


@router.get("/categories")
async def categories(user: User = Depends(get_current_user)):
    return ok(await marketplace_service.categories())


@router.post("/listings", status_code=201)
async def create_listing(request: ListingCreate, user: User = Depends(get_current_user)):
    return ok(await marketplace_service.create_listing(user, request), message="Listing created")


@router.get("/listings/{listing_id}")
async def get_listing(listing_id: str, user: User = Depends(get_current_user)):
    return ok(await marketplace_service.get_listing(user, listing_id))


@router.patch("/listings/{listing_id}")
async def update_listing(
    listing_id: str, request: ListingUpdate, user: User = Depends(get_current_user)
):
    data = await marketplace_service.update_listing(user, listing_id, request)
    return ok(data, message="Listing updated")


@router.delete("/listings/{listing_id}")
async def delete_listing(listing_id: str, user: User = Depends(get_current_user)):
    await marketplace_service.delete_listing(user, listing_id)
    return ok(message="Listing deleted")


@router.post("/listings/{listing_id}/contact")
async def contact_seller(
    listing_id: str, request: ContactSellerRequest, user: User = Depends(get_current_user)
):
    data = await marketplace_service.contact_seller(user, listing_id, request.message)
    return ok(data, message="Message sent to seller")
