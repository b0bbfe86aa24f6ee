"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`marketplace.services` without knowing internal
structure.

Re-exports
----------
- Base primitives (from ``marketplace.services._shared.base``)
    * :class:`BaseService`

- Shared DTOs (from ``marketplace.services._shared.dto``)
    * :class:`PageMeta`, :data:`UNSET`

- Auth service (from ``marketplace.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`SignUpIn`, :class:`SignInIn`, :class:`RefreshIn`,
      :class:`TokenPairOut`, :class:`UserPublicOut`, :class:`AuthTokenConfig`

- Ad service (from ``marketplace.services.ads``)
    * :class:`AdService`
    * DTOs: :class:`CreateAdIn`, :class:`UpdateAdIn`, :class:`AdOut`,
      :class:`AdResponseOut`, :class:`AdListOut`
"""

from __future__ import annotations

# Base primitives
from ._shared.base import BaseService

# Shared DTOs
from ._shared.dto import UNSET, PageMeta

# Ad service + DTOs
from .ads import AdListOut, AdOut, AdResponseOut, AdService, CreateAdIn, UpdateAdIn

# Auth service + DTOs
from .auth import (
    AuthService,
    AuthTokenConfig,
    RefreshIn,
    SignInIn,
    SignUpIn,
    TokenPairOut,
    UserPublicOut,
)

__all__ = [
    # Base
    "BaseService",
    # Shared DTOs
    "PageMeta",
    "UNSET",
    # Auth
    "AuthService",
    "AuthTokenConfig",
    "RefreshIn",
    "SignInIn",
    "SignUpIn",
    "TokenPairOut",
    "UserPublicOut",
    # Ads
    "AdService",
    "AdListOut",
    "AdOut",
    "AdResponseOut",
    "CreateAdIn",
    "UpdateAdIn",
]
