"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from marshmallow import Schema, fields


class MetaSchema(Schema):
    """Metadata block for paginated responses (dumped from ``PageMeta``)."""

    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    count = fields.Integer(required=True)
