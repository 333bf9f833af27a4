# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from threading import Lock

from socialauth.domain.users.entities import Session
from socialauth.domain.users.exceptions import SessionNotFoundError
from socialauth.domain.users.repositories import SessionStore
from socialauth.shared.logging import logger


class InMemorySessionStore(SessionStore):
    """Process-local session store. Not shared across workers."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._store: dict[str, Session] = {}

    def issue(self, session: Session) -> None:
        with self._lock:
            self._store[session.token] = session

    def get(self, token: str) -> Session | None:
        with self._lock:
            return self._store.get(token)

    def rotate(self, old_token: str, session: Session) -> None:
        with self._lock:
            if self._store.pop(old_token, None) is None:
                raise SessionNotFoundError()
            self._store[session.token] = session

    def destroy(self, token: str) -> None:
        with self._lock:
            self._store.pop(token, None)

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [token for token, entry in self._store.items() if entry.is_expired(now)]
            for token in expired:
                del self._store[token]
        if expired:
            logger.debug(f"sessions: dropped {len(expired)} expired entries")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


__all__ = ["InMemorySessionStore"]
