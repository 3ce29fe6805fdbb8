# app/domains/posts/schemas.py
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field, field_validator

from app.domains.auth.schemas import UserSummary, Visibility
from app.shared.schemas.base import CamelModel


class PostType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    SHARED = "shared"


def clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Lowercase, strip a leading # and drop blanks and duplicates, keeping order."""
    if tags is None:
        return None
    seen = []
    for tag in tags:
        tag = tag.strip().lstrip("#").lower()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class PostCreate(CamelModel):
    content: Optional[str] = Field(default=None, max_length=2000)
    images: List[str] = Field(default_factory=list)
    visibility: Optional[Visibility] = None
    tags: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    group_id: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        return clean_tags(v)


class PostUpdate(CamelModel):
    content: Optional[str] = Field(default=None, max_length=2000)
    images: Optional[List[str]] = None
    visibility: Optional[Visibility] = None
    tags: Optional[List[str]] = None
    location: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v):
        return clean_tags(v)


class ShareRequest(CamelModel):
    content: Optional[str] = Field(default=None, max_length=2000)
    visibility: Optional[Visibility] = None


class PostOut(CamelModel):
    id: str
    author: Optional[UserSummary] = None
    content: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    type: PostType
    visibility: Visibility
    tags: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    group: Optional[str] = None
    shared_post: Optional["PostOut"] = None
    # The referenced original exists but is hidden from this viewer
    shared_post_unavailable: bool = False
    reactions: Dict[str, List[str]]
    total_reactions: int = 0
    user_reaction: Optional[str] = None
    comments_count: int = 0
    shares_count: int = 0
    is_saved: bool = False
    saved_at: Optional[datetime] = None
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
