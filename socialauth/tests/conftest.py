from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from socialauth.application.services.credential_codec import Sha256CredentialCodec
from socialauth.application.services.session_manager import SessionManager
from socialauth.domain.users.entities import Credential, User, UserSummary
from socialauth.domain.users.exceptions import DuplicateUserError, UserNotFoundError
from socialauth.domain.users.repositories import UserRepository
from socialauth.infrastructure.sessions.in_memory import InMemorySessionStore
from socialauth.shared.config import (
    AppConfig,
    DatabaseConfig,
    PasswordConfig,
    SecurityConfig,
    SessionConfig,
)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = 1

    def exists(self, identity: str) -> bool:
        return any(u.username == identity or u.email == identity for u in self._users.values())

    def insert(self, username: str, email: str, password_hash: bytes, salt: bytes) -> int:
        if any(u.username == username or u.email == email for u in self._users.values()):
            raise DuplicateUserError()
        user = User(
            id=self._seq,
            username=username,
            email=email,
            credential=Credential(identity=username, password_hash=password_hash, salt=salt),
        )
        self._users[user.id] = user
        self._seq += 1
        return user.id

    def find_by_identity(self, identity: str) -> User:
        for user_id in sorted(self._users):
            user = self._users[user_id]
            if user.username == identity or user.email == identity:
                return user
        raise UserNotFoundError()

    def list_users(self) -> Iterator[UserSummary]:
        return iter(
            [UserSummary(id=u.id, username=u.username) for _, u in sorted(self._users.items())]
        )

    def __len__(self) -> int:
        return len(self._users)


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def codec() -> Sha256CredentialCodec:
    return Sha256CredentialCodec()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def session_manager(session_store: InMemorySessionStore, clock: FakeClock) -> SessionManager:
    return SessionManager(store=session_store, clock=clock)


@pytest.fixture()
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        app_env="test",
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'socialauth.db'}"),
        password=PasswordConfig(scheme="scrypt", scrypt_n=1024, scrypt_r=8, scrypt_p=1),
        session=SessionConfig(backend="database", cookie_name="sid"),
        security=SecurityConfig(allowed_origins=["http://localhost:5173"]),
    )
