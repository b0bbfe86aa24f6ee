from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import Protocol

from marketplace.services._shared.errors import InvalidTokenError


class TokenManager(Protocol):
    """Port for issuing and verifying access tokens and minting refresh tokens."""

    def new_access_token(self, user_id: int, ttl: timedelta) -> str:
        """Return a signed access token for ``user_id`` valid for ``ttl``."""

    def parse_access_token(self, token: str) -> int:
        """
        Return the user id carried by ``token``.

        :raises InvalidTokenError: On bad signature, unexpected algorithm,
            expiry, or malformed claims.
        """

    def new_refresh_token(self) -> str:
        """Return an opaque, cryptographically random refresh token."""


class StubTokenManager(TokenManager):
    """Deterministic token manager used in unit tests."""

    def __init__(self, *, now: datetime | None = None) -> None:
        self.now = now or datetime.now(tz=UTC)
        self._seq = 0
        self._issued: dict[str, tuple[int, datetime]] = {}

    def new_access_token(self, user_id: int, ttl: timedelta) -> str:
        self._seq += 1
        token = f"access.{user_id}.{self._seq}"
        self._issued[token] = (user_id, self.now + ttl)
        return token

    def parse_access_token(self, token: str) -> int:
        issued = self._issued.get(token)
        if issued is None:
            raise InvalidTokenError()
        user_id, expires_at = issued
        if expires_at <= self.now:
            raise InvalidTokenError("Token has expired")
        return user_id

    def new_refresh_token(self) -> str:
        self._seq += 1
        return f"refresh.{self._seq}.{secrets.token_hex(4)}"
