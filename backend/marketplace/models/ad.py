"""Classified ad model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Ad(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    A listing published by a user.

    Content rules (title length, URI shape, non-negative price) are enforced
    by the ad service before anything reaches the database; the check
    constraint on ``price`` is a last line for raw writes.
    """

    __tablename__ = "ads"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(1000), nullable=False, default="")
    image_url: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        Index("ix_ads_user_id", "user_id"),
        Index("ix_ads_created_at", "created_at"),
        Index("ix_ads_price", "price"),
    )

    # Relationships
    owner: Mapped[User] = relationship("User", back_populates="ads")
