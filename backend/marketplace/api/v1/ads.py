"""Classified ad endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from marketplace.api.deps import (
    ad_service,
    current_user_id,
    json_response,
    optional_auth,
    require_auth,
    timing,
)
from marketplace.schemas import (
    AdCreateSchema,
    AdListQuerySchema,
    AdResponseSchema,
    AdSchema,
    AdUpdateSchema,
    MetaSchema,
)
from marketplace.services import CreateAdIn, UpdateAdIn
from marketplace.services._shared.ports import GetAdsQuery

bp = Blueprint("ads", __name__)

ad_schema = AdSchema()
ad_response_schema = AdResponseSchema()
ad_response_list_schema = AdResponseSchema(many=True)
ad_create_schema = AdCreateSchema()
ad_update_schema = AdUpdateSchema()
ad_query_schema = AdListQuerySchema()
meta_schema = MetaSchema()


@bp.post("")
@require_auth
@timing
def create_ad():
    """Publish an ad owned by the caller."""

    payload = ad_create_schema.load(request.get_json(silent=True) or {})
    ad = ad_service().create(CreateAdIn(**payload), owner_id=current_user_id())
    return json_response({"data": ad_schema.dump(ad)}, status=201)


@bp.route("/<int:ad_id>", methods=["PUT", "PATCH"])
@require_auth
@timing
def update_ad(ad_id: int):
    """Apply a partial update; omitted fields keep their value."""

    payload = ad_update_schema.load(request.get_json(silent=True) or {})
    ad = ad_service().update(ad_id, current_user_id(), UpdateAdIn(**payload))
    return json_response({"data": ad_schema.dump(ad)})


@bp.get("")
@optional_auth
@timing
def list_ads():
    """Return one page of ads, filtered and sorted by the query string."""

    query = GetAdsQuery(**ad_query_schema.load(request.args))
    page = ad_service().get_all(query, viewer_id=current_user_id())
    return json_response(
        {
            "data": ad_response_list_schema.dump(page.items),
            "meta": meta_schema.dump(page.meta),
        }
    )


@bp.get("/<int:ad_id>")
@optional_auth
@timing
def get_ad(ad_id: int):
    """Return an ad with its author's login."""

    ad = ad_service().get_by_id_with_author(ad_id, viewer_id=current_user_id())
    return json_response({"data": ad_response_schema.dump(ad)})


@bp.delete("/<int:ad_id>")
@require_auth
@timing
def delete_ad(ad_id: int):
    """Delete an ad owned by the caller."""

    ad_service().delete(ad_id, current_user_id())
    return "", 204
