"""
marketplace.services._shared.ports
==================================

Collection of *ports* (hexagonal interfaces) that the services depend on.

Modules
-------
- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`, one-way credential hashing.

- :mod:`token_manager`:
    Defines :class:`~.TokenManager` for signed access tokens and opaque
    refresh tokens, plus :class:`~.StubTokenManager` for tests.

- :mod:`user_directory`:
    Defines :class:`~.UserDirectory`, account and refresh-session storage.

- :mod:`ad_directory`:
    Defines :class:`~.AdDirectory` and the :class:`~.GetAdsQuery` value object.

Design Notes
------------
Each directory port ships an in-memory implementation next to its contract.
The SQLAlchemy implementations live in ``marketplace.repositories`` and the
hashing/token adapters in ``marketplace.infra``.
"""

from __future__ import annotations

from .ad_directory import (
    AdDirectory,
    AdRecord,
    AdWithAuthor,
    GetAdsQuery,
    InMemoryAdDirectory,
    NewAd,
)
from .password_hasher import PasswordHasher
from .token_manager import StubTokenManager, TokenManager
from .user_directory import (
    InMemoryUserDirectory,
    NewUser,
    RefreshSession,
    UserDirectory,
    UserRecord,
)

__all__ = [
    "AdDirectory",
    "AdRecord",
    "AdWithAuthor",
    "GetAdsQuery",
    "InMemoryAdDirectory",
    "InMemoryUserDirectory",
    "NewAd",
    "NewUser",
    "PasswordHasher",
    "RefreshSession",
    "StubTokenManager",
    "TokenManager",
    "UserDirectory",
    "UserRecord",
]
