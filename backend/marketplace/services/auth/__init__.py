"""Authentication service layer: sign-up, sign-in and session refresh."""

from __future__ import annotations

from .dto import (
    AuthTokenConfig,
    RefreshIn,
    SignInIn,
    SignUpIn,
    TokenPairOut,
    UserPublicOut,
)
from .service import AuthService

__all__ = [
    "AuthService",
    # DTOs
    "AuthTokenConfig",
    "RefreshIn",
    "SignInIn",
    "SignUpIn",
    "TokenPairOut",
    "UserPublicOut",
]
