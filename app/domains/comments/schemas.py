# app/domains/comments/schemas.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from app.domains.auth.schemas import UserSummary
from app.shared.schemas.base import CamelModel


class CommentCreate(CamelModel):
    content: Optional[str] = Field(default=None, max_length=1000)
    image: Optional[str] = None
    parent_comment_id: Optional[str] = None


class CommentUpdate(CamelModel):
    content: str = Field(min_length=1, max_length=1000)


class CommentOut(CamelModel):
    id: str
    post: str
    author: Optional[UserSummary] = None
    content: Optional[str] = None
    image: Optional[str] = None
    parent_comment: Optional[str] = None
    reactions: Dict[str, List[str]]
    total_reactions: int = 0
    user_reaction: Optional[str] = None
    replies_count: int = 0
    is_edited: bool = False
    edited_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
