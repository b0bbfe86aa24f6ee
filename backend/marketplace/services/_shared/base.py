# marketplace/services/_shared/base.py
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from marketplace.services._shared.errors import ForbiddenError, ServiceError
from marketplace.services._shared.policies.common import is_owner
from marketplace.uow.base import UnitOfWork

logger = logging.getLogger(__name__)

UoWFactory = Callable[[], UnitOfWork]


def _default_rw_uow() -> UnitOfWork:
    from marketplace.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

    return SQLAlchemyUnitOfWork()


def _default_ro_uow() -> UnitOfWork:
    from marketplace.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork

    return SQLAlchemyReadOnlyUnitOfWork()


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Log infrastructure failures with the name of the failing operation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Unit-of-work factories are injected so tests can run services against
      in-memory directories.
    """

    def __init__(
        self,
        *,
        uow_factory: UoWFactory | None = None,
        ro_uow_factory: UoWFactory | None = None,
    ) -> None:
        """
        Initialize the base service.

        :param uow_factory: Builds read-write units of work. Defaults to SQLAlchemy.
        :type uow_factory: Callable[[], UnitOfWork] | None
        :param ro_uow_factory: Builds read-only units of work. Defaults to
            the SQLAlchemy read-only UoW when ``uow_factory`` is not given,
            otherwise to ``uow_factory`` itself.
        :type ro_uow_factory: Callable[[], UnitOfWork] | None
        """
        self._uow_factory = uow_factory or _default_rw_uow
        if ro_uow_factory is not None:
            self._ro_uow_factory = ro_uow_factory
        else:
            self._ro_uow_factory = uow_factory or _default_ro_uow

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> UnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: UnitOfWork
        """
        return self._uow_factory()

    def ro_uow(self) -> UnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: UnitOfWork
        """
        return self._ro_uow_factory()

    # -------------------------- Error handling ------------------------------

    @contextmanager
    def operation(self, op: str, **fields: object) -> Iterator[None]:
        """
        Scope a use-case so unexpected failures are logged with its name.

        Domain errors (:class:`ServiceError`) pass through silently; anything
        else is logged with ``op`` and re-raised unchanged.

        :param op: Operation name, e.g. ``"ads.create"``.
        :type op: str
        :param fields: Extra structured context (ids, never secrets).
        """
        try:
            yield
        except ServiceError:
            raise
        except Exception:
            logger.exception("operation failed", extra={"op": op, **fields})
            raise

    # --------------------------- AuthZ --------------------------------

    def ensure_owner(self, actor_id: int | None, owner_id: int) -> None:
        """
        Ensure the current actor is the resource owner.

        :param actor_id: Authenticated user id.
        :param owner_id: Expected owner id.
        :type owner_id: int
        :raises ForbiddenError: If actor is not the owner.
        """
        if not is_owner(actor_id=actor_id, owner_id=owner_id):
            raise ForbiddenError("You can only modify your own ads.")
