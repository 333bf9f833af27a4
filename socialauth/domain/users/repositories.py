# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from typing import Protocol

from .entities import Session, User, UserSummary


class UserRepository(Protocol):
    def exists(self, identity: str) -> bool: ...
    def insert(self, username: str, email: str, password_hash: bytes, salt: bytes) -> int: ...
    def find_by_identity(self, identity: str) -> User: ...
    def list_users(self) -> Iterator[UserSummary]: ...


class SessionStore(Protocol):
    """Shared session backend. Expiry policy lives in the session manager."""

    def issue(self, session: Session) -> None: ...
    def get(self, token: str) -> Session | None: ...
    def rotate(self, old_token: str, session: Session) -> None: ...
    def destroy(self, token: str) -> None: ...
    def purge_expired(self, now: datetime) -> int: ...


class CredentialCodec(Protocol):
    @property
    def salt_length(self) -> int: ...
    def generate_salt(self, length: int | None = None) -> bytes: ...
    def hash_password(self, password: str, salt: bytes) -> bytes: ...
    def verify(self, password: str, salt: bytes, expected: bytes) -> bool: ...
