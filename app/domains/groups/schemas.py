# app/domains/groups/schemas.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from app.domains.auth.schemas import UserSummary
from app.shared.schemas.base import CamelModel


class GroupType(str, Enum):
    GROUP = "group"
    PAGE = "page"


class GroupPrivacy(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class MemberRole(str, Enum):
    MEMBER = "member"
    MODERATOR = "moderator"
    ADMIN = "admin"


class GroupCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    type: GroupType = GroupType.GROUP
    category: str = "other"
    privacy: GroupPrivacy = GroupPrivacy.PUBLIC
    avatar: Optional[str] = None
    cover_photo: Optional[str] = None
    rules: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    website: Optional[str] = None


class GroupUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[str] = None
    privacy: Optional[GroupPrivacy] = None
    avatar: Optional[str] = None
    cover_photo: Optional[str] = None
    rules: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    location: Optional[str] = None
    website: Optional[str] = None


class JoinRequest(CamelModel):
    message: Optional[str] = Field(default=None, max_length=500)


class GroupOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    type: GroupType
    category: str
    privacy: GroupPrivacy
    avatar: Optional[str] = None
    cover_photo: Optional[str] = None
    admin: Optional[UserSummary] = None
    moderators: List[str] = Field(default_factory=list)
    rules: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    website: Optional[str] = None
    is_active: bool = True
    members_count: int = 0
    pending_requests_count: int = 0
    is_member: bool = False
    role: Optional[MemberRole] = None
    has_pending_request: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GroupMemberOut(CamelModel):
    user: UserSummary
    role: MemberRole
    joined_at: Optional[datetime] = None


class GroupJoinRequestOut(CamelModel):
    user: UserSummary
    message: Optional[str] = None
    requested_at: Optional[datetime] = None
