"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

# Length rules live in AuthService so violations surface as ``invalid_input``
# with the offending field; these schemas only check the payload shape.


class SignUpSchema(Schema):
    """Input payload for account creation."""

    login = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class SignInSchema(Schema):
    """Input payload for authenticating a user."""

    login = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class RefreshSchema(Schema):
    """Input payload for exchanging a refresh token."""

    refresh_token = fields.String(required=True, load_only=True)


class TokenPairSchema(Schema):
    """Response payload containing an access/refresh token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
