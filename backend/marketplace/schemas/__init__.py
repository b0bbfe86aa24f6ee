"""Convenience exports for application schemas."""

from __future__ import annotations

from .ad import AdCreateSchema, AdListQuerySchema, AdResponseSchema, AdSchema, AdUpdateSchema
from .auth import RefreshSchema, SignInSchema, SignUpSchema, TokenPairSchema
from .common import MetaSchema
from .user import UserSchema

__all__ = [
    "SignUpSchema",
    "SignInSchema",
    "RefreshSchema",
    "TokenPairSchema",
    "UserSchema",
    "AdCreateSchema",
    "AdUpdateSchema",
    "AdSchema",
    "AdResponseSchema",
    "AdListQuerySchema",
    "MetaSchema",
]
