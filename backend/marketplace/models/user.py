"""User model definition for the marketplace."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from marketplace.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .ad import Ad


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Account identity plus its single refresh session.

    Fields
    ------
    login : str
        Unique sign-in name (3 to 30 characters, checked by the service).
    password_hash : str
        Salted digest produced by the password hasher. Never serialized.
    refresh_token : str | None
        Opaque token of the current session. Overwritten on every sign-in or
        refresh, so at most one session is live per user.
    refresh_expires_at : datetime | None
        Absolute expiry of ``refresh_token``.
    last_visit_at : datetime | None
        Stamped whenever a session is written.
    """

    __tablename__ = "users"

    # Columns
    login: Mapped[str] = mapped_column(String(30), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    refresh_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_visit_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("login", name="uq_users_login"),
        Index("ix_users_refresh_token", "refresh_token"),
    )

    # Relationships
    ads: Mapped[list[Ad]] = relationship(
        "Ad", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True
    )

    # -------------------- Validators --------------------
    @validates("login")
    def _validate_login(self, key: str, value: str) -> str:
        """
        Reject empty logins at the ORM boundary.

        :param key: Field name (``login``).
        :type key: str
        :param value: Login to store.
        :type value: str
        :returns: The unchanged login.
        :rtype: str
        :raises ValueError: If login is missing or only whitespace.
        """
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Login is required.")
        return value
