# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TypeVar

T = TypeVar("T")


class Unset(Enum):
    """
    Marker type for command fields that were not supplied.

    ``None`` and ``""`` are legitimate values for some fields, so partial
    updates need a third state meaning "leave the stored value alone".
    """

    UNSET = auto()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = Unset.UNSET

#: A command field that is either supplied (``T``) or left untouched.
Maybe = T | Unset


def is_set(value: object) -> bool:
    """Return ``True`` when ``value`` was supplied by the caller."""
    return value is not UNSET


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param page: Current page (1-based).
    :type page: int
    :param limit: Page size.
    :type limit: int
    :param count: Number of items returned in this page.
    :type count: int
    """

    page: int
    limit: int
    count: int
