from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.shared.schemas.base import CamelModel


class Visibility(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"


class RegisterRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class ChangePasswordRequest(CamelModel):
    old_password: str
    new_password: str = Field(min_length=6, max_length=72)


class PrivacySettings(CamelModel):
    profile_visibility: Visibility = Visibility.PUBLIC
    friend_list_visibility: Visibility = Visibility.FRIENDS
    post_visibility: Visibility = Visibility.FRIENDS


class UserSummary(CamelModel):
    """Author/participant card embedded in other resources."""

    id: str
    name: str
    avatar: Optional[str] = None
    is_online: bool = False


class UserProfile(CamelModel):
    id: str
    name: str
    email: str
    avatar: Optional[str] = None
    cover_photo: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    work: Optional[str] = None
    education: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    privacy: PrivacySettings
    is_online: bool = False
    last_seen: Optional[datetime] = None
    is_verified: bool = False
    friends_count: int = 0
    posts_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def user_summary(user) -> dict:
    return UserSummary.model_validate(user).dump()


def user_profile(user, friends_count: int = 0, posts_count: int = 0) -> dict:
    return UserProfile(
        id=user.id,
        name=user.name,
        email=user.email,
        avatar=user.avatar,
        cover_photo=user.cover_photo,
        bio=user.bio,
        location=user.location,
        website=user.website,
        work=user.work,
        education=user.education,
        date_of_birth=user.date_of_birth,
        gender=user.gender,
        privacy=PrivacySettings(
            profile_visibility=user.profile_visibility,
            friend_list_visibility=user.friend_list_visibility,
            post_visibility=user.post_visibility,
        ),
        is_online=bool(user.is_online),
        last_seen=user.last_seen,
        is_verified=bool(user.is_verified),
        friends_count=friends_count,
        posts_count=posts_count,
        created_at=user.created_at,
        updated_at=user.updated_at,
    ).dump()
