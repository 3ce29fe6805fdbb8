# app/domains/events/schemas.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from app.domains.auth.schemas import UserSummary
from app.domains.posts.schemas import clean_tags
from app.shared.schemas.base import CamelModel


class EventCategory(str, Enum):
    MUSIC = "music"
    SPORTS = "sports"
    TECHNOLOGY = "technology"
    BUSINESS = "business"
    EDUCATION = "education"
    FOOD = "food"
    ART = "art"
    HEALTH = "health"
    SOCIAL = "social"
    OTHER = "other"


class EventSort(str, Enum):
    DATE = "date"
    POPULAR = "popular"
    NEWEST = "newest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"


class EventCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    starts_at: datetime
    location: Optional[str] = None
    category: EventCategory = EventCategory.OTHER
    image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    max_attendees: Optional[int] = Field(default=None, ge=1)
    price: float = Field(default=0, ge=0)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        return clean_tags(v)


class EventUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    starts_at: Optional[datetime] = None
    location: Optional[str] = None
    category: Optional[EventCategory] = None
    image: Optional[str] = None
    images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    max_attendees: Optional[int] = Field(default=None, ge=1)
    price: Optional[float] = Field(default=None, ge=0)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        return clean_tags(v)


class EventOut(CamelModel):
    id: str
    organizer: Optional[UserSummary] = None
    title: str
    description: Optional[str] = None
    starts_at: datetime
    location: Optional[str] = None
    category: EventCategory
    image: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    max_attendees: Optional[int] = None
    price: float = 0
    is_free: bool = True
    attendees_count: int = 0
    is_attending: bool = False
    is_full: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AttendeeOut(CamelModel):
    user: UserSummary
    joined_at: Optional[datetime] = None
