# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database unit of work implementation."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field

from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from socialauth.shared.errors import StorageError, StorageTimeoutError
from socialauth.shared.logging import logger

_TIMEOUT_MARKERS = (
    "database is locked",
    "statement timeout",
    "canceling statement",
    "timeout expired",
    "timed out",
)


def _is_timeout(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, PoolTimeoutError):
        return True
    if isinstance(exc, DBAPIError):
        message = str(exc.orig).lower()
        return any(marker in message for marker in _TIMEOUT_MARKERS)
    return False


@dataclass(slots=True)
class SqlAlchemyUnitOfWork(AbstractContextManager):
    """SQLAlchemy-backed unit of work.

    Commits on clean exit, rolls back otherwise, and re-raises SQLAlchemy
    failures as ``error`` / ``timeout_error`` so callers above the
    persistence boundary never see driver exceptions.
    """

    session_factory: Callable[[], Session]
    error: type[StorageError] = StorageError
    timeout_error: type[StorageError] = StorageTimeoutError
    _session: Session | None = field(default=None, init=False)

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        try:
            self._session = self.session_factory()
        except SQLAlchemyError as exc:
            raise self._translate(exc) from exc
        logger.debug("uow: session opened")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._session is not None
        try:
            if exc:
                logger.debug(f"uow: rollback due to {exc_type.__name__}")
                self._session.rollback()
            else:
                self._session.commit()
                logger.debug("uow: committed")
        except SQLAlchemyError as commit_exc:
            logger.warning(f"uow: failed to finalise: {type(commit_exc).__name__}")
            self._session.rollback()
            raise self._translate(commit_exc) from commit_exc
        finally:
            self._session.close()
            self._session = None
        if isinstance(exc, SQLAlchemyError):
            raise self._translate(exc) from exc

    def _translate(self, exc: SQLAlchemyError) -> StorageError:
        if _is_timeout(exc):
            logger.error(f"uow: storage timeout: {type(exc).__name__}")
            return self.timeout_error()
        logger.error(f"uow: storage failure: {type(exc).__name__}: {exc}")
        return self.error()

    @property
    def session(self) -> Session:
        if self._session is None:
            msg = "UnitOfWork session accessed before entering context"
            raise RuntimeError(msg)
        return self._session


@contextmanager
def unit_of_work_scope(
    factory: Callable[[], Session],
    *,
    error: type[StorageError] = StorageError,
    timeout_error: type[StorageError] = StorageTimeoutError,
) -> Iterator[Session]:
    """Provide a context manager yielding a session."""

    with SqlAlchemyUnitOfWork(factory, error=error, timeout_error=timeout_error) as uow:
        yield uow.session
