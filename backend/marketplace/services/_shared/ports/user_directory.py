from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, Protocol

from marketplace.services._shared.errors import UserExistsError, UserNotFoundError


@dataclass(frozen=True, slots=True)
class RefreshSession:
    """
    The single live refresh session of a user.

    :ivar refresh_token: Opaque token handed to the client.
    :ivar expires_at: Absolute expiration (UTC). The token is usable while
        ``now < expires_at``.
    """

    refresh_token: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class UserRecord:
    """
    Read-model for an account as stored by a :class:`UserDirectory`.

    The password hash is carried so the authentication service can verify
    credentials; it is never exposed by any service output.
    """

    id: int
    login: str
    password_hash: str = field(repr=False)
    created_at: datetime | None = None
    last_visit_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class NewUser:
    """Write-model used when creating an account."""

    login: str
    password_hash: str = field(repr=False)


class UserDirectory(Protocol):
    """
    Persistence boundary for accounts and their refresh session.

    Implementations never commit; the surrounding unit of work does.
    """

    def create(self, user: NewUser) -> int:
        """
        Persist a new user and return its id.

        :raises UserExistsError: When the login is already taken. Detection is
            delegated to the store's uniqueness guarantee, not a pre-check.
        """

    def get_by_login(self, login: str) -> UserRecord | None:
        """Return the user with ``login`` or ``None``."""

    def get_by_id(self, user_id: int) -> UserRecord:
        """:raises UserNotFoundError: When ``user_id`` does not exist."""

    def get_by_refresh_token(self, token: str, *, now: datetime) -> UserRecord:
        """
        Resolve the user whose *current* session holds ``token``.

        Expiry is part of the lookup predicate: a session whose
        ``expires_at`` is not strictly after ``now`` does not match.

        :raises UserNotFoundError: When no live session matches.
        """

    def set_session(self, user_id: int, session: RefreshSession) -> None:
        """Overwrite the user's session and stamp ``last_visit_at``."""


@dataclass(slots=True)
class _StoredUser:
    record: UserRecord
    session: RefreshSession | None = None


class InMemoryUserDirectory(UserDirectory):
    """
    Dictionary-backed :class:`UserDirectory` for unit tests.

    .. note::
       Uses a threading lock so concurrent sign-ins behave like the database
       (last writer wins on the session slot).
    """

    def __init__(self) -> None:
        self._by_id: dict[int, _StoredUser] = {}
        self._seq = 0
        self._lock = threading.Lock()

    # ------------------------- UoW support -------------------------

    def snapshot(self) -> Any:
        with self._lock:
            return copy.deepcopy((self._by_id, self._seq))

    def restore(self, state: Any) -> None:
        with self._lock:
            self._by_id, self._seq = state

    # -------------------------- API ----------------------------

    def create(self, user: NewUser) -> int:
        with self._lock:
            if any(s.record.login == user.login for s in self._by_id.values()):
                raise UserExistsError(user.login)
            self._seq += 1
            record = UserRecord(
                id=self._seq,
                login=user.login,
                password_hash=user.password_hash,
                created_at=datetime.now(UTC),
            )
            self._by_id[record.id] = _StoredUser(record=record)
            return record.id

    def get_by_login(self, login: str) -> UserRecord | None:
        with self._lock:
            for stored in self._by_id.values():
                if stored.record.login == login:
                    return stored.record
            return None

    def get_by_id(self, user_id: int) -> UserRecord:
        with self._lock:
            stored = self._by_id.get(user_id)
            if stored is None:
                raise UserNotFoundError(user_id)
            return stored.record

    def get_by_refresh_token(self, token: str, *, now: datetime) -> UserRecord:
        with self._lock:
            for stored in self._by_id.values():
                s = stored.session
                if s is not None and s.refresh_token == token and s.expires_at > now:
                    return stored.record
            raise UserNotFoundError("refresh_token")

    def set_session(self, user_id: int, session: RefreshSession) -> None:
        with self._lock:
            stored = self._by_id.get(user_id)
            if stored is None:
                raise UserNotFoundError(user_id)
            stored.session = session
            stored.record = replace(stored.record, last_visit_at=datetime.now(UTC))

    def session_of(self, user_id: int) -> RefreshSession | None:
        """Return the stored session of ``user_id`` (test inspection helper)."""
        with self._lock:
            stored = self._by_id.get(user_id)
            return stored.session if stored else None
