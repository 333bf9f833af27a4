# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError

from socialauth.domain.users.entities import Credential, UserSummary
from socialauth.domain.users.entities import Session as DomainSession
from socialauth.domain.users.entities import User as DomainUser
from socialauth.domain.users.exceptions import (
    DuplicateUserError,
    SessionNotFoundError,
    UserNotFoundError,
)
from socialauth.domain.users.repositories import SessionStore, UserRepository
from socialauth.infrastructure.db.models import SessionRecord, User
from socialauth.infrastructure.db.session import SessionFactory
from socialauth.infrastructure.unit_of_work import unit_of_work_scope
from socialauth.shared.errors import SessionStoreError, SessionStoreTimeoutError
from socialauth.shared.logging import logger


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _identity_clause(identity: str):
    return or_(User.username == identity, User.email == identity)


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def exists(self, identity: str) -> bool:
        with unit_of_work_scope(self._session_factory) as session:
            found = session.execute(
                select(User.id).where(_identity_clause(identity)).limit(1)
            ).first()
            return found is not None

    def insert(self, username: str, email: str, password_hash: bytes, salt: bytes) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            row = User(username=username, email=email, password_hash=password_hash, salt=salt)
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                logger.info(f"users: unique constraint rejected username={username}")
                raise DuplicateUserError() from exc
            return row.id

    def find_by_identity(self, identity: str) -> DomainUser:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(
                select(User).where(_identity_clause(identity)).order_by(User.id.asc()).limit(1)
            ).first()
            if row is None:
                raise UserNotFoundError()
            return DomainUser(
                id=row.id,
                username=row.username,
                email=row.email,
                credential=Credential(
                    identity=identity,
                    password_hash=bytes(row.password_hash),
                    salt=bytes(row.salt),
                ),
            )

    def list_users(self) -> Iterator[UserSummary]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.execute(select(User.id, User.username).order_by(User.id.asc())).all()
        return iter([UserSummary(id=row.id, username=row.username) for row in rows])


class SqlAlchemySessionStore(SessionStore):
    """Session rows in the shared database, visible to every server process."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def _scope(self):
        return unit_of_work_scope(
            self._session_factory,
            error=SessionStoreError,
            timeout_error=SessionStoreTimeoutError,
        )

    @staticmethod
    def _to_row(session: DomainSession) -> SessionRecord:
        return SessionRecord(
            token=session.token,
            user_id=session.user_id,
            created_at=session.created_at,
            expires_at=session.expires_at,
            renewed=session.renewed,
        )

    def issue(self, session: DomainSession) -> None:
        with self._scope() as db:
            db.add(self._to_row(session))

    def get(self, token: str) -> DomainSession | None:
        with self._scope() as db:
            row = db.get(SessionRecord, token)
            if row is None:
                return None
            return DomainSession(
                token=row.token,
                user_id=row.user_id,
                created_at=_as_utc(row.created_at),
                expires_at=_as_utc(row.expires_at),
                renewed=bool(row.renewed),
            )

    def rotate(self, old_token: str, session: DomainSession) -> None:
        # Delete and insert share one transaction: either both land or neither.
        with self._scope() as db:
            result = db.execute(delete(SessionRecord).where(SessionRecord.token == old_token))
            if result.rowcount == 0:
                raise SessionNotFoundError()
            db.add(self._to_row(session))

    def destroy(self, token: str) -> None:
        with self._scope() as db:
            db.execute(delete(SessionRecord).where(SessionRecord.token == token))

    def purge_expired(self, now: datetime) -> int:
        with self._scope() as db:
            result = db.execute(delete(SessionRecord).where(SessionRecord.expires_at <= now))
            return int(result.rowcount or 0)
