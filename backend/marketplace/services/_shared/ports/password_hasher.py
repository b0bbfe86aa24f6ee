from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way password hashing."""

    def hash(self, plain: str) -> str:
        """Return a salted digest of ``plain``."""

    def check(self, plain: str, digest: str) -> bool:
        """Return ``True`` when ``plain`` matches ``digest``. Never raises on mismatch."""
