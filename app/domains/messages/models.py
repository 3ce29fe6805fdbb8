# app/domains/messages/models.py
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin
from app.shared.models.base import Base


class Message(Base, TimestampMixin):
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_pair_created", "sender_id", "receiver_id", "created_at"),
        Index("ix_messages_receiver_read", "receiver_id", "is_read"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    sender_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"))
    receiver_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"))
    content: Mapped[str] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String, default="text")  # text, image
    image: Mapped[str] = mapped_column(String, nullable=True)
    reply_to_id: Mapped[str] = mapped_column(
        String, ForeignKey("messages.id", ondelete="SET NULL"), nullable=True
    )

    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    read_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    is_edited: Mapped[bool] = mapped_column(Boolean, default=False)
    edited_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
