# app/domains/comments/models.py
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin
from app.shared.models.base import Base


class Comment(Base, TimestampMixin):
    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_post_parent", "post_id", "parent_comment_id"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    author_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"))
    post_id: Mapped[str] = mapped_column(String, ForeignKey("posts.id", ondelete="CASCADE"))
    content: Mapped[str] = mapped_column(Text, nullable=True)
    image: Mapped[str] = mapped_column(String, nullable=True)
    # Replies are one level deep: parent is always a top-level comment
    parent_comment_id: Mapped[str] = mapped_column(
        String, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True
    )
    is_edited: Mapped[bool] = mapped_column(Boolean, default=False)
    edited_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
