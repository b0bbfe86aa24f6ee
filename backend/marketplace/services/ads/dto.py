# marketplace/services/ads/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from marketplace.services._shared.dto import UNSET, Maybe, PageMeta

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class CreateAdIn:
    """
    Input DTO for publishing an ad.

    :param title: 1 to 100 characters.
    :type title: str
    :param description: Up to 1000 characters.
    :type description: str
    :param image_url: Absolute URI, or empty for no image.
    :type image_url: str
    :param price: Non-negative price.
    :type price: float
    """

    title: str
    description: str = ""
    image_url: str = ""
    price: float = 0


@dataclass(frozen=True, slots=True)
class UpdateAdIn:
    """
    Partial update of an ad.

    Every field defaults to :data:`UNSET`, meaning "keep the stored value".
    An explicit empty string is stored as such.
    """

    title: Maybe[str] = UNSET
    description: Maybe[str] = UNSET
    image_url: Maybe[str] = UNSET
    price: Maybe[float] = UNSET


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AdOut:
    """Stored ad, as returned by create/update/get."""

    id: int
    owner_id: int
    title: str
    description: str
    image_url: str
    price: float
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class AdResponseOut:
    """
    Ad joined with its author, as seen by a particular viewer.

    :param author_login: Login of the owner.
    :type author_login: str
    :param is_owner: ``True``/``False`` for an authenticated viewer, ``None``
        when the viewer is anonymous.
    :type is_owner: bool | None
    """

    id: int
    owner_id: int
    title: str
    description: str
    image_url: str
    price: float
    created_at: datetime | None
    author_login: str
    is_owner: bool | None = None


@dataclass(frozen=True, slots=True)
class AdListOut:
    """One page of ads plus pagination metadata."""

    items: list[AdResponseOut] = field(default_factory=list)
    meta: PageMeta | None = None
