# app/domains/users/schemas.py
from datetime import date
from typing import Optional

from pydantic import Field, HttpUrl, TypeAdapter, field_validator

from app.domains.auth.schemas import Gender, Visibility
from app.shared.schemas.base import CamelModel

_url = TypeAdapter(HttpUrl)


class PrivacyUpdate(CamelModel):
    profile_visibility: Optional[Visibility] = None
    friend_list_visibility: Optional[Visibility] = None
    post_visibility: Optional[Visibility] = None


class ProfileUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar: Optional[str] = None
    cover_photo: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=100)
    website: Optional[str] = None
    work: Optional[str] = Field(default=None, max_length=100)
    education: Optional[str] = Field(default=None, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    privacy: Optional[PrivacyUpdate] = None

    @field_validator("website")
    @classmethod
    def validate_website(cls, v: Optional[str]) -> Optional[str]:
        if v:
            _url.validate_python(v)
        return v

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, v: Optional[date]) -> Optional[date]:
        if v and v > date.today():
            raise ValueError("Date of birth cannot be in the future")
        return v
