# app/domains/notifications/models.py
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin
from app.shared.models.base import Base


class Notification(Base, TimestampMixin):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_recipient_read", "recipient_id", "is_read"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    recipient_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"))
    sender_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"))
    # like, comment, friend_request, friend_accept, message, group_invite, post_share
    type: Mapped[str] = mapped_column(String)
    message: Mapped[str] = mapped_column(Text)

    related_post_id: Mapped[str] = mapped_column(String, nullable=True)
    related_comment_id: Mapped[str] = mapped_column(String, nullable=True)
    related_group_id: Mapped[str] = mapped_column(String, nullable=True)

    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    read_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
