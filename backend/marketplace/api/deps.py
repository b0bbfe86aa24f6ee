"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from marketplace.core.errors import Unauthorized
from marketplace.core.extensions import get_password_hasher, get_timing_digest, get_token_manager
from marketplace.services import AdService, AuthService, AuthTokenConfig
from marketplace.services._shared.errors import InvalidTokenError

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "bearer "


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Authentication
# --------------------------------------------------------------------------- #


def _bearer_token() -> str | None:
    """Return the token from ``Authorization: Bearer <token>``, if any."""

    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


def current_user_id() -> int | None:
    """Return the authenticated user id for this request, or ``None``."""

    return g.get("current_user_id")


def require_auth(func: F) -> F:
    """Reject the request with 401 unless it carries a valid access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.current_user_id = None
        token = _bearer_token()
        if token is None:
            raise Unauthorized("Missing bearer token")
        g.current_user_id = get_token_manager().parse_access_token(token)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Identify the caller when a valid token is sent; otherwise stay anonymous."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.current_user_id = None
        token = _bearer_token()
        if token is not None:
            try:
                g.current_user_id = get_token_manager().parse_access_token(token)
            except InvalidTokenError:
                current_app.logger.debug("optional_auth.invalid_token")
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Service builders
# --------------------------------------------------------------------------- #


def auth_service() -> AuthService:
    """Build an :class:`AuthService` wired to the current application."""

    cfg = current_app.config
    return AuthService(
        hasher=get_password_hasher(),
        token_manager=get_token_manager(),
        token_cfg=AuthTokenConfig(
            access_expires=cfg["ACCESS_TOKEN_TTL"],
            refresh_expires=cfg["REFRESH_TOKEN_TTL"],
        ),
        timing_digest=get_timing_digest(),
    )


def ad_service() -> AdService:
    """Build an :class:`AdService` for the current request."""

    return AdService()
