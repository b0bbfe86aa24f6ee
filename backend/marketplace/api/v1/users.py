"""Account and session endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from marketplace.api.deps import auth_service, current_user_id, json_response, require_auth, timing
from marketplace.core.errors import Unauthorized
from marketplace.schemas import (
    RefreshSchema,
    SignInSchema,
    SignUpSchema,
    TokenPairSchema,
    UserSchema,
)
from marketplace.services import RefreshIn, SignInIn, SignUpIn
from marketplace.services._shared.errors import UserNotFoundError

bp = Blueprint("users", __name__)

sign_up_schema = SignUpSchema()
sign_in_schema = SignInSchema()
refresh_schema = RefreshSchema()
token_schema = TokenPairSchema()
user_schema = UserSchema()


@bp.post("/sign-up")
@timing
def sign_up():
    """Create an account and return its public representation."""

    payload = sign_up_schema.load(request.get_json(silent=True) or {})
    user = auth_service().sign_up(SignUpIn(**payload))
    return json_response({"data": user_schema.dump(user)}, status=201)


@bp.post("/sign-in")
@timing
def sign_in():
    """Authenticate credentials and issue an access/refresh token pair."""

    payload = sign_in_schema.load(request.get_json(silent=True) or {})
    pair = auth_service().sign_in(SignInIn(**payload))
    return json_response({"data": token_schema.dump(pair)})


@bp.post("/auth/refresh")
@timing
def refresh():
    """Rotate the caller's refresh token."""

    payload = refresh_schema.load(request.get_json(silent=True) or {})
    try:
        pair = auth_service().refresh_tokens(RefreshIn(**payload))
    except UserNotFoundError as exc:
        raise Unauthorized("Invalid or expired refresh token", code="invalid_token") from exc
    return json_response({"data": token_schema.dump(pair)})


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user."""

    user = auth_service().get_user(current_user_id())
    return json_response({"data": user_schema.dump(user)})
