"""HTTP helper utilities for tests."""

from __future__ import annotations

from urllib.parse import urlencode


def bearer(token: str) -> dict[str, str]:
    """Return an ``Authorization`` header for ``token``."""

    return {"Authorization": f"Bearer {token}"}


def build_url(path: str, **query: str | int | float | None) -> str:
    """Build a URL with encoded query parameters.

    Parameters
    ----------
    path:
        Base path of the endpoint.
    **query:
        Query parameters to append; ``None`` values are skipped.

    Returns
    -------
    str
        Final URL string including encoded query string.
    """

    qs = urlencode({k: v for k, v in query.items() if v is not None})
    return f"{path}?{qs}" if qs else path
