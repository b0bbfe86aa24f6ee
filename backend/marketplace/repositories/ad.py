"""Ad repository: CRUD plus the filtered, sorted and paginated listing."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, select

from marketplace.models.ad import Ad
from marketplace.models.user import User
from marketplace.repositories.base import BaseRepository, apply_ordering, apply_window
from marketplace.services._shared.errors import AdNotFoundError
from marketplace.services._shared.ports import (
    AdDirectory,
    AdRecord,
    AdWithAuthor,
    GetAdsQuery,
    NewAd,
)


def to_ad_record(ad: Ad) -> AdRecord:
    """Convert a mapped :class:`Ad` into a detached :class:`AdRecord`."""
    return AdRecord(
        id=ad.id,
        owner_id=ad.user_id,
        title=ad.title,
        description=ad.description,
        image_url=ad.image_url,
        price=float(ad.price),
        created_at=ad.created_at,
    )


def to_ad_with_author(ad: Ad, login: str) -> AdWithAuthor:
    return AdWithAuthor(
        id=ad.id,
        owner_id=ad.user_id,
        title=ad.title,
        description=ad.description,
        image_url=ad.image_url,
        price=float(ad.price),
        created_at=ad.created_at,
        author_login=login,
    )


class AdRepository(BaseRepository[Ad], AdDirectory):
    """Persistence-only repository for :class:`Ad`.

    Implements :class:`~marketplace.services._shared.ports.AdDirectory`.
    Ownership checks and content validation belong to the ad service.
    """

    model = Ad

    # ---------------------------- Internals ----------------------------

    def _with_author_stmt(self) -> Select[Any]:
        return select(Ad, User.login).join(User, User.id == Ad.user_id)

    def _require(self, ad_id: int) -> Ad:
        ad = self.get(ad_id)
        if ad is None:
            raise AdNotFoundError(ad_id)
        return ad

    # ---------------------------- Writes ----------------------------

    def create(self, ad: NewAd) -> int:
        """Insert an ad and return its id."""
        instance = self.add(
            Ad(
                user_id=ad.owner_id,
                title=ad.title,
                description=ad.description,
                image_url=ad.image_url,
                price=ad.price,
            )
        )
        return instance.id

    def update(self, ad_id: int, ad: AdRecord) -> None:
        """Copy the mutable fields of ``ad`` onto row ``ad_id``.

        ``owner_id`` and ``created_at`` of ``ad`` are ignored.

        :raises AdNotFoundError: When ``ad_id`` does not exist.
        """
        instance = self._require(ad_id)
        instance.title = ad.title
        instance.description = ad.description
        instance.image_url = ad.image_url
        instance.price = ad.price
        self.flush()

    def delete(self, ad_id: int) -> None:
        """:raises AdNotFoundError: When ``ad_id`` does not exist."""
        self.remove(self._require(ad_id))

    # ---------------------------- Reads ----------------------------

    def get_by_id(self, ad_id: int) -> AdRecord:
        return to_ad_record(self._require(ad_id))

    def get_by_id_with_author(self, ad_id: int) -> AdWithAuthor:
        row = self.session.execute(self._with_author_stmt().where(Ad.id == ad_id)).first()
        if row is None:
            raise AdNotFoundError(ad_id)
        ad, login = row
        return to_ad_with_author(ad, login)

    def get_all(self, query: GetAdsQuery) -> list[AdWithAuthor]:
        """Return one page of ads joined with their author's login.

        * ``price >= min_price`` only when ``min_price > 0``.
        * ``price <= max_price`` only when ``max_price > 0``.
        * Sorted by ``price`` or ``created_at``, ``id`` breaking ties.

        :param query: Listing parameters.
        :type query: GetAdsQuery
        :returns: Ads of the requested page.
        :rtype: list[AdWithAuthor]
        """
        stmt = self._with_author_stmt()
        if query.min_price > 0:
            stmt = stmt.where(Ad.price >= query.min_price)
        if query.max_price > 0:
            stmt = stmt.where(Ad.price <= query.max_price)

        column = Ad.price if query.sort_by_price else Ad.created_at
        stmt = apply_ordering(stmt, column, descending=query.descending, pk_attr=self._pk_attr())
        stmt = apply_window(stmt, limit=query.effective_limit, offset=query.offset)

        return [to_ad_with_author(ad, login) for ad, login in self.session.execute(stmt).all()]
