# app/domains/auth/models.py
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin, utcnow
from app.shared.models.base import Base


class User(Base, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (
        # Password may only be absent for accounts created through an identity provider
        CheckConstraint(
            "password_hash IS NOT NULL OR google_id IS NOT NULL OR facebook_id IS NOT NULL",
            name="ck_users_credentials",
        ),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String, nullable=True)
    google_id: Mapped[str] = mapped_column(String, unique=True, nullable=True)
    facebook_id: Mapped[str] = mapped_column(String, unique=True, nullable=True)

    avatar: Mapped[str] = mapped_column(String, nullable=True)
    cover_photo: Mapped[str] = mapped_column(String, nullable=True)
    bio: Mapped[str] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(String, nullable=True)
    website: Mapped[str] = mapped_column(String, nullable=True)
    work: Mapped[str] = mapped_column(String, nullable=True)
    education: Mapped[str] = mapped_column(String, nullable=True)
    date_of_birth: Mapped[datetime] = mapped_column(Date, nullable=True)
    gender: Mapped[str] = mapped_column(String, nullable=True)

    # Privacy: public, friends, private
    profile_visibility: Mapped[str] = mapped_column(String, default="public")
    friend_list_visibility: Mapped[str] = mapped_column(String, default="friends")
    post_visibility: Mapped[str] = mapped_column(String, default="friends")

    is_online: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    last_seen: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
