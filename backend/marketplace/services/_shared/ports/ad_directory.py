from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Protocol

from marketplace.services._shared.errors import AdNotFoundError

DEFAULT_LIMIT = 10
# Upper bounds keep (page - 1) * limit well inside a 64-bit SQL integer.
MAX_LIMIT = 1000
MAX_PAGE = 1_000_000
SORT_BY_PRICE = "price"
SORT_ASC = "asc"


@dataclass(frozen=True, slots=True)
class AdRecord:
    """
    Read-model for a stored ad.

    :ivar id: Ad identifier.
    :ivar owner_id: Id of the user who created the ad. Never changes.
    :ivar title: 1 to 100 characters.
    :ivar description: Up to 1000 characters.
    :ivar image_url: Absolute URI or empty string.
    :ivar price: Non-negative price.
    :ivar created_at: Creation timestamp (UTC).
    """

    id: int
    owner_id: int
    title: str
    description: str
    image_url: str
    price: float
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class AdWithAuthor:
    """:class:`AdRecord` joined with the owner's login."""

    id: int
    owner_id: int
    title: str
    description: str
    image_url: str
    price: float
    created_at: datetime | None
    author_login: str


@dataclass(frozen=True, slots=True)
class NewAd:
    """Write-model used when creating an ad."""

    owner_id: int
    title: str
    description: str
    image_url: str
    price: float


@dataclass(frozen=True, slots=True)
class GetAdsQuery:
    """
    Listing parameters for :meth:`AdDirectory.get_all`.

    :param page: 1-based page number. Values below 2 mean the first page.
    :param limit: Page size. Values ``<= 0`` fall back to ``DEFAULT_LIMIT``.
    :param sort_by: ``"price"`` sorts by price; anything else by creation date.
    :param sort_dir: ``"asc"`` (any case) sorts ascending; anything else descending.
    :param min_price: Lower price bound, ignored unless ``> 0``.
    :param max_price: Upper price bound, ignored unless ``> 0``.
    """

    page: int = 1
    limit: int = DEFAULT_LIMIT
    sort_by: str = "date"
    sort_dir: str = "desc"
    min_price: float = 0
    max_price: float = 0

    @property
    def effective_limit(self) -> int:
        return self.limit if self.limit > 0 else DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.effective_limit if self.page > 1 else 0

    @property
    def sort_by_price(self) -> bool:
        return (self.sort_by or "").strip().lower() == SORT_BY_PRICE

    @property
    def descending(self) -> bool:
        return (self.sort_dir or "").strip().lower() != SORT_ASC


class AdDirectory(Protocol):
    """Persistence boundary for ads. Implementations never commit."""

    def create(self, ad: NewAd) -> int:
        """Persist ``ad`` and return its id."""

    def update(self, ad_id: int, ad: AdRecord) -> None:
        """
        Overwrite the mutable fields of ``ad_id`` with those of ``ad``.

        :raises AdNotFoundError: When ``ad_id`` does not exist.
        """

    def get_by_id(self, ad_id: int) -> AdRecord:
        """:raises AdNotFoundError: When ``ad_id`` does not exist."""

    def get_by_id_with_author(self, ad_id: int) -> AdWithAuthor:
        """:raises AdNotFoundError: When ``ad_id`` does not exist."""

    def get_all(self, query: GetAdsQuery) -> list[AdWithAuthor]:
        """
        Return one page of ads filtered by price and sorted by date or price.

        Rows with equal sort keys are ordered by ``id`` in the same direction,
        so pages never overlap.
        """

    def delete(self, ad_id: int) -> None:
        """:raises AdNotFoundError: When ``ad_id`` does not exist."""


class InMemoryAdDirectory(AdDirectory):
    """
    Dictionary-backed :class:`AdDirectory` for unit tests.

    Author logins are resolved through ``logins``, a callable usually bound to
    an :class:`~.user_directory.InMemoryUserDirectory`.
    """

    def __init__(self, *, logins: Any = None) -> None:
        self._by_id: dict[int, AdRecord] = {}
        self._seq = 0
        self._lock = threading.Lock()
        self._logins = logins or (lambda owner_id: "")

    # ------------------------- UoW support -------------------------

    def snapshot(self) -> Any:
        with self._lock:
            return copy.deepcopy((self._by_id, self._seq))

    def restore(self, state: Any) -> None:
        with self._lock:
            self._by_id, self._seq = state

    # ------------------------- helpers -------------------------

    def _with_author(self, ad: AdRecord) -> AdWithAuthor:
        return AdWithAuthor(
            id=ad.id,
            owner_id=ad.owner_id,
            title=ad.title,
            description=ad.description,
            image_url=ad.image_url,
            price=ad.price,
            created_at=ad.created_at,
            author_login=self._logins(ad.owner_id),
        )

    # -------------------------- API ----------------------------

    def create(self, ad: NewAd) -> int:
        with self._lock:
            self._seq += 1
            self._by_id[self._seq] = AdRecord(
                id=self._seq,
                owner_id=ad.owner_id,
                title=ad.title,
                description=ad.description,
                image_url=ad.image_url,
                price=ad.price,
                created_at=datetime.now(UTC),
            )
            return self._seq

    def update(self, ad_id: int, ad: AdRecord) -> None:
        with self._lock:
            current = self._by_id.get(ad_id)
            if current is None:
                raise AdNotFoundError(ad_id)
            self._by_id[ad_id] = AdRecord(
                id=current.id,
                owner_id=current.owner_id,
                title=ad.title,
                description=ad.description,
                image_url=ad.image_url,
                price=ad.price,
                created_at=current.created_at,
            )

    def get_by_id(self, ad_id: int) -> AdRecord:
        with self._lock:
            ad = self._by_id.get(ad_id)
        if ad is None:
            raise AdNotFoundError(ad_id)
        return ad

    def get_by_id_with_author(self, ad_id: int) -> AdWithAuthor:
        return self._with_author(self.get_by_id(ad_id))

    def get_all(self, query: GetAdsQuery) -> list[AdWithAuthor]:
        with self._lock:
            rows = list(self._by_id.values())
        if query.min_price > 0:
            rows = [a for a in rows if a.price >= query.min_price]
        if query.max_price > 0:
            rows = [a for a in rows if a.price <= query.max_price]

        if query.sort_by_price:
            rows.sort(key=lambda a: (a.price, a.id), reverse=query.descending)
        else:
            rows.sort(key=lambda a: (a.created_at, a.id), reverse=query.descending)

        start = query.offset
        return [self._with_author(a) for a in rows[start : start + query.effective_limit]]

    def delete(self, ad_id: int) -> None:
        with self._lock:
            if self._by_id.pop(ad_id, None) is None:
                raise AdNotFoundError(ad_id)
