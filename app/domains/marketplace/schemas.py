# app/domains/marketplace/schemas.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from app.domains.auth.schemas import UserSummary
from app.shared.schemas.base import CamelModel


class ListingCategory(str, Enum):
    ELECTRONICS = "electronics"
    FASHION = "fashion"
    HOME_GARDEN = "home_garden"
    SPORTS = "sports"
    BOOKS = "books"
    AUTOMOTIVE = "automotive"
    COLLECTIBLES = "collectibles"
    ART_CRAFTS = "art_crafts"
    OTHER = "other"


CATEGORY_LABELS = {
    ListingCategory.ELECTRONICS: "Electronics",
    ListingCategory.FASHION: "Fashion",
    ListingCategory.HOME_GARDEN: "Home & Garden",
    ListingCategory.SPORTS: "Sports",
    ListingCategory.BOOKS: "Books",
    ListingCategory.AUTOMOTIVE: "Automotive",
    ListingCategory.COLLECTIBLES: "Collectibles",
    ListingCategory.ART_CRAFTS: "Art & Crafts",
    ListingCategory.OTHER: "Other",
}


class ListingCondition(str, Enum):
    NEW = "new"
    LIKE_NEW = "like_new"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ListingStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"


class ListingSort(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    POPULAR = "popular"


class ListingCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: float = Field(ge=0)
    category: ListingCategory = ListingCategory.OTHER
    condition: ListingCondition = ListingCondition.GOOD
    images: List[str] = Field(default_factory=list)
    location: Optional[str] = None


class ListingUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[ListingCategory] = None
    condition: Optional[ListingCondition] = None
    images: Optional[List[str]] = None
    location: Optional[str] = None
    status: Optional[ListingStatus] = None


class ContactSellerRequest(CamelModel):
    message: str = Field(min_length=1, max_length=1000)


class ListingOut(CamelModel):
    id: str
    seller: Optional[UserSummary] = None
    title: str
    description: Optional[str] = None
    price: float
    category: ListingCategory
    condition: ListingCondition
    images: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    status: ListingStatus
    views: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
