"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or HTTP.
They are the stable contract between directories (repositories), services and
the delivery layer.

The translation to HTTP responses (RFC 7807) is handled by
``marketplace/core/errors.py``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name in the message. SQLite only reports
    the offending columns (``UNIQUE constraint failed: users.login``), so the
    ``uq_<table>_<column>`` naming convention is also matched against that form.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :type exc: IntegrityError
    :param constraint_name: Database constraint to match (e.g. ``uq_users_login``).
    :type constraint_name: str
    :returns: ``True`` if the IntegrityError matches the given constraint.
    :rtype: bool
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if name.startswith("uq_") and "unique" in message:
        table, _, column = name[3:].partition("_")
        return f"{table}.{column}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from directories or services.
    - ``marketplace.core.errors`` maps them to problem responses.
    """

    pass


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in a directory.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class InvalidInputError(ServiceError):
    """
    Raised when a command fails local validation.

    :param field: Name of the offending input field.
    :type field: str
    :param message: Human-readable reason.
    :type message: str
    """

    field: str
    message: str

    def __str__(self) -> str:
        return f"invalid {self.field}: {self.message}"


class InvalidCredentialsError(ServiceError):
    """Raised for any failed sign-in, whatever the underlying reason."""

    def __init__(self, message: str = "Invalid login or password") -> None:
        super().__init__(message)


class InvalidTokenError(ServiceError):
    """Raised when an access token cannot be verified."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class ForbiddenError(ServiceError):
    """Raised when the requester is not allowed to act on a resource."""

    def __init__(self, message: str = "You do not own this resource") -> None:
        super().__init__(message)


class UserExistsError(ConflictError):
    """Raised when a login is already taken."""

    def __init__(self, login: str) -> None:
        super().__init__("User", f"login '{login}' already exists")


class UserNotFoundError(NotFoundError):
    """Raised when a user (or a live session for it) cannot be found."""

    def __init__(self, key: str | int) -> None:
        super().__init__("User", key)


class AdNotFoundError(NotFoundError):
    """Raised when an ad id does not exist."""

    def __init__(self, key: int) -> None:
        super().__init__("Ad", key)
