"""User Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class UserSchema(Schema):
    """Public representation of an account. Never carries credentials."""

    id = fields.Integer(dump_only=True)
    login = fields.String(required=True)
    created_at = fields.DateTime(dump_only=True, allow_none=True)
