"""Ads service layer exposing the ad service and its DTOs."""

from __future__ import annotations

from .dto import AdListOut, AdOut, AdResponseOut, CreateAdIn, UpdateAdIn
from .service import AdService, validate_ad_fields

__all__ = [
    "AdService",
    "validate_ad_fields",
    # DTOs
    "AdListOut",
    "AdOut",
    "AdResponseOut",
    "CreateAdIn",
    "UpdateAdIn",
]
