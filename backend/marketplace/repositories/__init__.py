"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from marketplace.repositories.ad import AdRepository
from marketplace.repositories.base import BaseRepository, apply_ordering, apply_window
from marketplace.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "apply_ordering",
    "apply_window",
    # Domain
    "AdRepository",
    "UserRepository",
]
