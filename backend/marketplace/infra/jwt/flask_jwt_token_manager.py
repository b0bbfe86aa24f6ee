# marketplace/infra/jwt/flask_jwt_token_manager.py
from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from marketplace.services._shared.errors import InvalidTokenError
from marketplace.services._shared.ports import TokenManager

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_BYTES = 32


@dataclass(slots=True)
class JWTTokenManager(TokenManager):
    """
    Adapter for Flask-JWT-Extended.

    Access tokens are HS256 JWTs carrying the user id in ``sub``. The signing
    key and the accepted algorithms come from ``JWT_SECRET_KEY``,
    ``JWT_ALGORITHM`` and ``JWT_DECODE_ALGORITHMS``, fixed at app creation.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    refresh_token_bytes: int = REFRESH_TOKEN_BYTES

    def new_access_token(self, user_id: int, ttl: timedelta) -> str:
        return cast(
            str,
            create_access_token(identity=str(user_id), expires_delta=ttl, fresh=False),
        )

    def parse_access_token(self, token: str) -> int:
        if not token:
            raise InvalidTokenError("Missing token")
        try:
            claims = cast(dict[str, Any], decode_token(token))
        except (PyJWTError, JWTExtendedException) as exc:
            raise InvalidTokenError(str(exc) or "Invalid token") from exc

        # Refresh tokens are opaque here; a JWT of any other type is not an access token.
        if claims.get("type") != ACCESS_TOKEN_TYPE:
            raise InvalidTokenError("Wrong token type: access token required.")
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject.isdigit():
            raise InvalidTokenError("Invalid token subject.")
        return int(subject)

    def new_refresh_token(self) -> str:
        # 32 bytes -> 256 bits, base64url without padding
        return secrets.token_urlsafe(self.refresh_token_bytes)
