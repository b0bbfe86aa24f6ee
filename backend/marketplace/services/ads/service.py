# marketplace/services/ads/service.py
from __future__ import annotations

import logging
from dataclasses import replace
from urllib.parse import urlparse

from marketplace.services._shared.base import BaseService
from marketplace.services._shared.dto import PageMeta, is_set
from marketplace.services._shared.errors import InvalidInputError
from marketplace.services._shared.policies.common import is_owner
from marketplace.services._shared.ports import AdRecord, AdWithAuthor, GetAdsQuery, NewAd
from marketplace.services.ads.dto import (
    AdListOut,
    AdOut,
    AdResponseOut,
    CreateAdIn,
    UpdateAdIn,
)

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
WEB_SCHEMES = frozenset({"http", "https"})


def validate_ad_fields(*, title: str, description: str, image_url: str, price: float) -> None:
    """
    Validate the user-editable fields of an ad.

    :raises InvalidInputError: On the first offending field.
    """
    if not 1 <= len(title or "") <= TITLE_MAX_LENGTH:
        raise InvalidInputError("title", f"must be 1 to {TITLE_MAX_LENGTH} characters long")
    if len(description or "") > DESCRIPTION_MAX_LENGTH:
        raise InvalidInputError(
            "description", f"must be at most {DESCRIPTION_MAX_LENGTH} characters long"
        )
    if image_url:
        parsed = urlparse(image_url)
        # Any scheme is absolute (data:, urn:); web schemes also need a host.
        if not parsed.scheme or (parsed.scheme in WEB_SCHEMES and not parsed.netloc):
            raise InvalidInputError("image_url", "must be an absolute URI")
    if price is None or price < 0:
        raise InvalidInputError("price", "cannot be negative")


def _to_ad_out(ad: AdRecord) -> AdOut:
    return AdOut(
        id=ad.id,
        owner_id=ad.owner_id,
        title=ad.title,
        description=ad.description,
        image_url=ad.image_url,
        price=ad.price,
        created_at=ad.created_at,
    )


def _to_response(ad: AdWithAuthor, viewer_id: int | None) -> AdResponseOut:
    return AdResponseOut(
        id=ad.id,
        owner_id=ad.owner_id,
        title=ad.title,
        description=ad.description,
        image_url=ad.image_url,
        price=ad.price,
        created_at=ad.created_at,
        author_login=ad.author_login,
        is_owner=None if viewer_id is None else is_owner(actor_id=viewer_id, owner_id=ad.owner_id),
    )


class AdService(BaseService):
    """
    Application service for classified ads.

    Responsibilities
    ----------------
    - Validate and persist new ads for an authenticated owner.
    - Apply partial updates and deletions, restricted to the owner.
    - Serve single ads and filtered/sorted pages, flagging ownership for
      authenticated viewers.

    Notes
    -----
    - Validation and ownership checks run before any write.
    - The owner of an ad never changes.
    """

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create(self, dto: CreateAdIn, owner_id: int) -> AdOut:
        """
        Publish a new ad owned by ``owner_id``.

        :param dto: Ad fields.
        :type dto: :class:`CreateAdIn`
        :param owner_id: Authenticated user id.
        :type owner_id: int
        :returns: The stored ad, re-read after insert.
        :rtype: :class:`AdOut`
        :raises InvalidInputError: If any field is invalid.
        """
        validate_ad_fields(
            title=dto.title,
            description=dto.description,
            image_url=dto.image_url,
            price=dto.price,
        )
        with self.operation("ads.create", user_id=owner_id), self.rw_uow() as uow:
            ad_id = uow.ads.create(
                NewAd(
                    owner_id=owner_id,
                    title=dto.title,
                    description=dto.description or "",
                    image_url=dto.image_url or "",
                    price=dto.price,
                )
            )
            ad = uow.ads.get_by_id(ad_id)

        logger.info("ad created", extra={"ad_id": ad.id, "user_id": owner_id})
        return _to_ad_out(ad)

    def update(self, ad_id: int, requester_id: int, dto: UpdateAdIn) -> AdOut:
        """
        Apply a partial update to an ad owned by ``requester_id``.

        :param ad_id: Target ad id.
        :param requester_id: Authenticated user id.
        :param dto: Fields to change; unset fields keep their stored value.
        :type dto: :class:`UpdateAdIn`
        :returns: The merged ad.
        :rtype: :class:`AdOut`
        :raises AdNotFoundError: If the ad does not exist.
        :raises ForbiddenError: If the requester is not the owner.
        :raises InvalidInputError: If the merged ad is invalid.
        """
        with self.operation("ads.update", ad_id=ad_id, user_id=requester_id):
            with self.rw_uow() as uow:
                current = uow.ads.get_by_id(ad_id)
                self.ensure_owner(requester_id, current.owner_id)

                merged = replace(
                    current,
                    title=dto.title if is_set(dto.title) else current.title,
                    description=dto.description if is_set(dto.description) else current.description,
                    image_url=dto.image_url if is_set(dto.image_url) else current.image_url,
                    price=dto.price if is_set(dto.price) else current.price,
                )
                validate_ad_fields(
                    title=merged.title,
                    description=merged.description,
                    image_url=merged.image_url,
                    price=merged.price,
                )
                uow.ads.update(ad_id, merged)

        logger.info("ad updated", extra={"ad_id": ad_id, "user_id": requester_id})
        return _to_ad_out(merged)

    def delete(self, ad_id: int, requester_id: int) -> None:
        """
        Delete an ad owned by ``requester_id``.

        :raises AdNotFoundError: If the ad does not exist (also on repeats).
        :raises ForbiddenError: If the requester is not the owner.
        """
        with self.operation("ads.delete", ad_id=ad_id, user_id=requester_id):
            with self.rw_uow() as uow:
                current = uow.ads.get_by_id(ad_id)
                self.ensure_owner(requester_id, current.owner_id)
                uow.ads.delete(ad_id)

        logger.info("ad deleted", extra={"ad_id": ad_id, "user_id": requester_id})

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get_by_id(self, ad_id: int) -> AdOut:
        """:raises AdNotFoundError: If the ad does not exist."""
        with self.operation("ads.get_by_id", ad_id=ad_id), self.ro_uow() as uow:
            return _to_ad_out(uow.ads.get_by_id(ad_id))

    def get_by_id_with_author(self, ad_id: int, viewer_id: int | None = None) -> AdResponseOut:
        """
        Return an ad with its author's login.

        :param ad_id: Target ad id.
        :param viewer_id: Authenticated viewer, or ``None`` for anonymous.
        :returns: Projection with ``is_owner`` set only for a known viewer.
        :raises AdNotFoundError: If the ad does not exist.
        """
        with self.operation("ads.get_by_id_with_author", ad_id=ad_id), self.ro_uow() as uow:
            ad = uow.ads.get_by_id_with_author(ad_id)
        return _to_response(ad, viewer_id)

    def get_all(self, query: GetAdsQuery, viewer_id: int | None = None) -> AdListOut:
        """
        List one page of ads.

        Price bounds apply only when positive. Sorting is by creation date
        unless ``sort_by`` is ``"price"``; direction is descending unless
        ``sort_dir`` is ``"asc"``. Equal keys are ordered by id in the same
        direction.

        :param query: Filter, sort and window parameters.
        :type query: :class:`GetAdsQuery`
        :param viewer_id: Authenticated viewer, or ``None`` for anonymous.
        :returns: Items plus page metadata.
        :rtype: :class:`AdListOut`
        """
        with self.operation("ads.get_all"), self.ro_uow() as uow:
            rows = uow.ads.get_all(query)

        items = [_to_response(ad, viewer_id) for ad in rows]
        meta = PageMeta(
            page=max(query.page, 1),
            limit=query.effective_limit,
            count=len(items),
        )
        return AdListOut(items=items, meta=meta)
