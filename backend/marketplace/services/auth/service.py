# marketplace/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from marketplace.services._shared.base import BaseService, UoWFactory
from marketplace.services._shared.errors import InvalidCredentialsError, InvalidInputError
from marketplace.services._shared.ports import (
    NewUser,
    PasswordHasher,
    RefreshSession,
    TokenManager,
    UserRecord,
)
from marketplace.services.auth.dto import (
    AuthTokenConfig,
    RefreshIn,
    SignInIn,
    SignUpIn,
    TokenPairOut,
    UserPublicOut,
)

logger = logging.getLogger(__name__)

LOGIN_MIN_LENGTH = 3
LOGIN_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6

# Hashed when no shared timing digest is injected.
_TIMING_DUMMY_PASSWORD = "timing-equalizer"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _public(user: UserRecord) -> UserPublicOut:
    return UserPublicOut(id=user.id, login=user.login, created_at=user.created_at)


class AuthService(BaseService):
    """
    Authentication lifecycle service (sign-up / sign-in / refresh).

    Each user has at most one live session: a refresh token and its expiry
    stored on the user row. Every sign-in or refresh overwrites it, which
    invalidates the previous refresh token. Two concurrent refreshes with the
    same token may both pass the lookup; the last write wins and only its
    token stays usable.
    """

    def __init__(
        self,
        *,
        hasher: PasswordHasher,
        token_manager: TokenManager,
        token_cfg: AuthTokenConfig | None = None,
        uow_factory: UoWFactory | None = None,
        ro_uow_factory: UoWFactory | None = None,
        clock: Callable[[], datetime] | None = None,
        timing_digest: str | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param hasher: One-way password hasher.
        :param token_manager: Issues access tokens and refresh tokens.
        :param token_cfg: Access/Refresh expiry configuration.
        :param uow_factory: Read-write unit-of-work factory.
        :param ro_uow_factory: Read-only unit-of-work factory.
        :param clock: Returns the current UTC time.
        :param timing_digest: Digest checked against when the login is
            unknown, so that path costs one ``check`` and no ``hash``. Built
            lazily, once per instance, when omitted.
        """
        super().__init__(uow_factory=uow_factory, ro_uow_factory=ro_uow_factory)
        self.hasher = hasher
        self.tokens = token_manager
        self.cfg = token_cfg or AuthTokenConfig()
        self._clock = clock or _utcnow
        self._dummy_digest = timing_digest

    # ------------------------------------------------------------------ #
    # Sign-up
    # ------------------------------------------------------------------ #

    def sign_up(self, dto: SignUpIn) -> UserPublicOut:
        """
        Create an account.

        :param dto: Login and raw password.
        :returns: The stored user, without any credential material.
        :raises InvalidInputError: If login or password fail the length rules.
        :raises UserExistsError: If the login is already taken.
        """
        login_len = len(dto.login or "")
        if not LOGIN_MIN_LENGTH <= login_len <= LOGIN_MAX_LENGTH:
            raise InvalidInputError(
                "login", f"must be {LOGIN_MIN_LENGTH} to {LOGIN_MAX_LENGTH} characters long"
            )
        if len(dto.password or "") < PASSWORD_MIN_LENGTH:
            raise InvalidInputError(
                "password", f"must be at least {PASSWORD_MIN_LENGTH} characters long"
            )

        with self.operation("auth.sign_up", login=dto.login):
            digest = self.hasher.hash(dto.password)
            with self.rw_uow() as uow:
                user_id = uow.users.create(NewUser(login=dto.login, password_hash=digest))
                user = uow.users.get_by_id(user_id)

        logger.info("user signed up", extra={"user_id": user.id})
        return _public(user)

    # ------------------------------------------------------------------ #
    # Sign-in
    # ------------------------------------------------------------------ #

    def sign_in(self, dto: SignInIn) -> TokenPairOut:
        """
        Authenticate credentials and start a new session.

        :param dto: Login input.
        :returns: Access/Refresh token pair.
        :raises InvalidCredentialsError: For an unknown login or a wrong
            password alike.
        """
        with self.operation("auth.sign_in"):
            with self.ro_uow() as uow:
                user = uow.users.get_by_login(dto.login)

            if user is None:
                self.hasher.check(dto.password or "", self._timing_digest())
                raise InvalidCredentialsError()
            if not self.hasher.check(dto.password or "", user.password_hash):
                raise InvalidCredentialsError()

            pair = self._create_session(user.id)

        logger.info("user signed in", extra={"user_id": user.id})
        return pair

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh_tokens(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange the current refresh token for a new pair (rotation).

        :param dto: Refresh input.
        :returns: New access/refresh pair. The presented token stops working.
        :raises InvalidInputError: If the token is empty.
        :raises UserNotFoundError: If no live session holds the token
            (unknown, superseded or expired).
        """
        if not dto.refresh_token:
            raise InvalidInputError("refresh_token", "must not be empty")

        with self.operation("auth.refresh_tokens"):
            with self.ro_uow() as uow:
                user = uow.users.get_by_refresh_token(dto.refresh_token, now=self._clock())
            pair = self._create_session(user.id)

        logger.info("session refreshed", extra={"user_id": user.id})
        return pair

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Return the public view of ``user_id``.

        :raises UserNotFoundError: If the user does not exist.
        """
        with self.operation("auth.get_user", user_id=user_id), self.ro_uow() as uow:
            return _public(uow.users.get_by_id(user_id))

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _create_session(self, user_id: int) -> TokenPairOut:
        """
        Issue a token pair and store the refresh half as the only session.

        Both tokens are generated before the write; they are returned only
        once the unit of work has committed.
        """
        access = self.tokens.new_access_token(user_id, self.cfg.access_expires)
        refresh = self.tokens.new_refresh_token()
        session = RefreshSession(
            refresh_token=refresh,
            expires_at=self._clock() + self.cfg.refresh_expires,
        )
        with self.rw_uow() as uow:
            uow.users.set_session(user_id, session)
        return TokenPairOut(access_token=access, refresh_token=refresh)

    def _timing_digest(self) -> str:
        if self._dummy_digest is None:
            self._dummy_digest = self.hasher.hash(_TIMING_DUMMY_PASSWORD)
        return self._dummy_digest
