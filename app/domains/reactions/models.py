# app/domains/reactions/models.py
from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin
from app.shared.models.base import Base


class Reaction(Base, TimestampMixin):
    """A user's single reaction on a post or a comment."""

    __tablename__ = "reactions"
    __table_args__ = (
        UniqueConstraint("user_id", "target_id", "target_type", name="uq_reaction_user_target"),
        Index("ix_reactions_target", "target_type", "target_id"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"))
    target_type: Mapped[str] = mapped_column(String)  # post, comment
    target_id: Mapped[str] = mapped_column(String)
    type: Mapped[str] = mapped_column(String)  # like, love, haha, wow, sad, angry
