"""Ad Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, post_dump, validate

from marketplace.services._shared.ports.ad_directory import DEFAULT_LIMIT, MAX_LIMIT, MAX_PAGE


class AdCreateSchema(Schema):
    """Input payload for publishing an ad."""

    title = fields.String(required=True)
    description = fields.String(load_default="")
    image_url = fields.String(load_default="")
    price = fields.Float(load_default=0.0)


class AdUpdateSchema(Schema):
    """Input payload for a partial update. Absent keys are left untouched."""

    title = fields.String()
    description = fields.String()
    image_url = fields.String()
    price = fields.Float()


class AdSchema(Schema):
    """Stored ad representation."""

    id = fields.Integer(dump_only=True)
    user_id = fields.Integer(attribute="owner_id", dump_only=True)
    title = fields.String()
    description = fields.String()
    image_url = fields.String()
    price = fields.Float()
    created_at = fields.DateTime(dump_only=True, allow_none=True)


class AdResponseSchema(AdSchema):
    """Ad with its author's login and the viewer's ownership flag."""

    author_login = fields.String(dump_only=True)
    is_owner = fields.Boolean(dump_only=True, allow_none=True)

    @post_dump
    def drop_anonymous_owner_flag(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        if data.get("is_owner") is None:
            data.pop("is_owner", None)
        return data


class AdListQuerySchema(Schema):
    """Query-string parameters for ``GET /ads``."""

    page = fields.Integer(load_default=1, validate=validate.Range(max=MAX_PAGE))
    limit = fields.Integer(load_default=DEFAULT_LIMIT, validate=validate.Range(max=MAX_LIMIT))
    sort_by = fields.String(load_default="date")
    sort_dir = fields.String(load_default="desc")
    min_price = fields.Float(load_default=0.0)
    max_price = fields.Float(load_default=0.0)
