"""User repository: account persistence and refresh-session storage."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from marketplace.models.user import User
from marketplace.repositories.base import BaseRepository
from marketplace.services._shared.errors import UserExistsError, UserNotFoundError, violates
from marketplace.services._shared.ports import NewUser, RefreshSession, UserDirectory, UserRecord

LOGIN_CONSTRAINT = "uq_users_login"


def to_user_record(user: User) -> UserRecord:
    """Convert a mapped :class:`User` into a detached :class:`UserRecord`."""
    return UserRecord(
        id=user.id,
        login=user.login,
        password_hash=user.password_hash,
        created_at=user.created_at,
        last_visit_at=user.last_visit_at,
    )


class UserRepository(BaseRepository[User], UserDirectory):
    """Persistence-only repository for :class:`User`.

    Implements :class:`~marketplace.services._shared.ports.UserDirectory`.
    It NEVER issues tokens or hashes passwords; it only stores what the
    authentication service hands over.
    """

    model = User

    # ---------------------------- Writes ----------------------------

    def create(self, user: NewUser) -> int:
        """Insert a user, relying on ``uq_users_login`` to detect duplicates.

        The insert runs inside a SAVEPOINT so a collision does not poison the
        surrounding transaction.

        :param user: Login and password digest.
        :type user: NewUser
        :returns: Id of the new row.
        :rtype: int
        :raises UserExistsError: When the login is already taken.
        """
        instance = User(login=user.login, password_hash=user.password_hash)
        try:
            with self.session.begin_nested():
                self.session.add(instance)
                self.session.flush()
        except IntegrityError as exc:
            if violates(exc, LOGIN_CONSTRAINT):
                raise UserExistsError(user.login) from exc
            raise
        return instance.id

    def set_session(self, user_id: int, session: RefreshSession) -> None:
        """Overwrite the refresh session of ``user_id`` and stamp ``last_visit_at``.

        :raises UserNotFoundError: When ``user_id`` does not exist.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                refresh_token=session.refresh_token,
                refresh_expires_at=session.expires_at,
                last_visit_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            raise UserNotFoundError(user_id)

    # ---------------------------- Lookups ----------------------------

    def get_by_login(self, login: str) -> UserRecord | None:
        """Fetch a user by exact login.

        :param login: Login to search.
        :type login: str
        :returns: User record or ``None`` when not found.
        :rtype: UserRecord | None
        """
        user = self.session.execute(select(User).where(User.login == login)).scalars().first()
        return to_user_record(user) if user is not None else None

    def get_by_id(self, user_id: int) -> UserRecord:
        user = self.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return to_user_record(user)

    def get_by_refresh_token(self, token: str, *, now: datetime) -> UserRecord:
        """Resolve the owner of a live refresh session.

        The expiry check is part of the ``WHERE`` clause, so an expired or
        superseded token simply matches no row.

        :raises UserNotFoundError: When no live session holds ``token``.
        """
        stmt = select(User).where(
            User.refresh_token == token,
            User.refresh_expires_at > now,
        )
        user = self.session.execute(stmt).scalars().first()
        if user is None:
            raise UserNotFoundError("refresh_token")
        return to_user_record(user)
