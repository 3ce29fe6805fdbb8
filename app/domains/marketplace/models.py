# app/domains/marketplace/models.py
from sqlalchemy import JSON, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin
from app.shared.models.base import Base


class Listing(Base, TimestampMixin):
    __tablename__ = "listings"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    seller_id: Mapped[str] = mapped_column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Float, index=True)
    category: Mapped[str] = mapped_column(String, default="other", index=True)
    condition: Mapped[str] = mapped_column(String, default="good")  # new, like_new, good, fair, poor
    images: Mapped[list] = mapped_column(JSON, default=list)
    location: Mapped[str] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, default="active", index=True)  # active, pending, sold
    views: Mapped[int] = mapped_column(Integer, default=0)
