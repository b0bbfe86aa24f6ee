"""Unit tests for the service-error to HTTP mapping."""

from __future__ import annotations

import pytest

from marketplace.core.errors import service_error_status
from marketplace.services._shared.errors import (
    AdNotFoundError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidInputError,
    InvalidTokenError,
    ServiceError,
    UserExistsError,
    UserNotFoundError,
)


@pytest.mark.parametrize(
    ("err", "status", "code"),
    [
        (InvalidInputError("title", "too long"), 400, "invalid_input"),
        (InvalidCredentialsError(), 401, "invalid_credentials"),
        (InvalidTokenError(), 401, "invalid_token"),
        (ForbiddenError(), 403, "forbidden"),
        (UserNotFoundError(1), 404, "not_found"),
        (AdNotFoundError(1), 404, "not_found"),
        (UserExistsError("alice"), 409, "conflict"),
        (ServiceError("other"), 400, "bad_request"),
    ],
)
def test_service_error_status(err, status, code):
    assert service_error_status(err) == (status, code)


def test_error_messages_are_readable():
    assert str(AdNotFoundError(5)) == "Ad not found: 5"
    assert str(UserExistsError("alice")) == (
        "Conflict on User: login 'alice' already exists"
    )
    assert str(InvalidInputError("price", "cannot be negative")) == "invalid price: cannot be negative"
