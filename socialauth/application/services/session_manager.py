# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Server-side session lifecycle: issue, rotate, resolve, destroy."""

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from socialauth.domain.users.entities import Session
from socialauth.domain.users.exceptions import SessionExpiredError, SessionNotFoundError
from socialauth.domain.users.repositories import SessionStore
from socialauth.shared.errors import EntropyError
from socialauth.shared.logging import logger

TOKEN_BYTES = 48
DEFAULT_TTL = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def generate_token() -> str:
    try:
        return secrets.token_urlsafe(TOKEN_BYTES)
    except (OSError, NotImplementedError) as exc:
        logger.error(f"session: random source failed: {type(exc).__name__}")
        raise EntropyError() from exc


class SessionManager:
    def __init__(
        self,
        *,
        store: SessionStore,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
        token_factory: Callable[[], str] = generate_token,
    ) -> None:
        self._store = store
        self._ttl = ttl
        self._clock = clock
        self._token_factory = token_factory

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def _new_session(self, user_id: int, *, renewed: bool) -> Session:
        now = self._clock()
        return Session(
            token=self._token_factory(),
            user_id=user_id,
            created_at=now,
            expires_at=now + self._ttl,
            renewed=renewed,
        )

    def issue_or_renew(self, user_id: int, current_token: str | None = None) -> Session:
        """Bind a fresh token to ``user_id``.

        A live ``current_token`` is rotated: the store swaps it for the new
        token in one step, so the old value stops resolving the moment the
        new one starts. Dead or unknown tokens are dropped and a new session
        is issued instead.
        """
        if current_token:
            existing = self._store.get(current_token)
            if existing is not None and not existing.is_expired(self._clock()):
                session = self._new_session(user_id, renewed=True)
                try:
                    self._store.rotate(current_token, session)
                except SessionNotFoundError:
                    # lost a race with logout/another rotation; fall through
                    logger.info(f"session: rotation source vanished user={user_id}")
                else:
                    logger.info(
                        f"session: rotated user={user_id} exp={session.expires_at.isoformat()}"
                    )
                    return session
            elif existing is not None:
                self._store.destroy(current_token)

        session = self._new_session(user_id, renewed=False)
        self._store.issue(session)
        logger.info(f"session: issued user={user_id} exp={session.expires_at.isoformat()}")
        return session

    def resolve(self, token: str) -> int:
        if not token:
            raise SessionNotFoundError()
        session = self._store.get(token)
        if session is None:
            raise SessionNotFoundError()
        if session.is_expired(self._clock()):
            self._store.destroy(token)
            logger.debug(f"session: expired user={session.user_id}")
            raise SessionExpiredError()
        return session.user_id

    def destroy(self, token: str | None) -> None:
        if not token:
            return
        self._store.destroy(token)

    def purge_expired(self) -> int:
        removed = self._store.purge_expired(self._clock())
        if removed:
            logger.info(f"session: purged {removed} expired sessions")
        return removed


__all__ = ["DEFAULT_TTL", "SessionManager", "generate_token"]
