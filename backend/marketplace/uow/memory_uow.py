"""
In-memory implementation of UnitOfWork for service unit tests.
"""

from __future__ import annotations

from typing import Any

from marketplace.services._shared.ports import InMemoryAdDirectory, InMemoryUserDirectory
from marketplace.uow.base import UnitOfWork


class InMemoryUnitOfWork(UnitOfWork):
    """
    UoW over dictionary-backed directories.

    ``__enter__`` snapshots both directories; leaving the block with an
    exception restores them, so a failed use-case leaves no partial writes.
    The same instance can be entered repeatedly, which lets tests hand
    ``lambda: uow`` to a service as its factory.
    """

    def __init__(
        self,
        users: InMemoryUserDirectory | None = None,
        ads: InMemoryAdDirectory | None = None,
    ) -> None:
        self.users = users or InMemoryUserDirectory()
        self.ads = ads or InMemoryAdDirectory(logins=self._login_of)
        self.commits = 0
        self._snapshot: tuple[Any, Any] | None = None

    def _login_of(self, user_id: int) -> str:
        return self.users.get_by_id(user_id).login

    def __enter__(self) -> InMemoryUnitOfWork:
        self._snapshot = (self.users.snapshot(), self.ads.snapshot())
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                try:
                    self.commit()
                except Exception:
                    self.rollback()
                    raise
            else:
                self.rollback()
        finally:
            self._snapshot = None

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        if self._snapshot is None:
            return
        users_state, ads_state = self._snapshot
        self.users.restore(users_state)
        self.ads.restore(ads_state)
