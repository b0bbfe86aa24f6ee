# marketplace/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class SignUpIn:
    """
    Input DTO for account creation.

    :param login: Desired login (3 to 30 characters).
    :type login: str
    :param password: Raw password (at least 6 characters).
    :type password: str
    """

    login: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class SignInIn:
    """
    Input DTO for sign-in.

    :param login: Account login.
    :type login: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    login: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Opaque refresh token from a previous sign-in or refresh.
    :type refresh_token: str
    """

    refresh_token: str = field(repr=False)


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Signed access JWT.
    :type access_token: str
    :param refresh_token: Opaque refresh token.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public view of an account. Carries no credential material.

    :param id: User id.
    :param login: Login.
    :param created_at: Creation timestamp.
    """

    id: int
    login: str
    created_at: datetime | None = None


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh session lifetime.
    :type refresh_expires: timedelta
    """

    access_expires: timedelta = timedelta(hours=1)
    refresh_expires: timedelta = timedelta(days=30)
