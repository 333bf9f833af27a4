from __future__ import annotations

import pytest

from socialauth.application.services.credential_codec import Sha256CredentialCodec
from socialauth.application.services.session_manager import SessionManager
from socialauth.application.use_cases.users.list_users import ListUsersUseCase
from socialauth.application.use_cases.users.login_user import LoginUserUseCase
from socialauth.application.use_cases.users.logout_user import LogoutUserUseCase
from socialauth.application.use_cases.users.register_user import RegisterUserUseCase
from socialauth.domain.users.entities import UserSummary
from socialauth.domain.users.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    PasswordMismatchError,
    SessionNotFoundError,
    UserAlreadyExistsError,
)
from socialauth.shared.errors import ConflictError, ValidationError


@pytest.fixture()
def register(users, codec) -> RegisterUserUseCase:
    return RegisterUserUseCase(users=users, codec=codec)


@pytest.fixture()
def login(users, codec, session_manager) -> LoginUserUseCase:
    return LoginUserUseCase(users=users, codec=codec, sessions=session_manager)


def test_register_persists_salted_credential(register, users, codec) -> None:
    user_id = register.execute("alice", "alice@example.com", "p1", "p1")

    assert user_id == 1
    stored = users.find_by_identity("alice")
    assert stored.email == "alice@example.com"
    assert len(stored.credential.salt) == 32
    assert stored.credential.password_hash == codec.hash_password("p1", stored.credential.salt)
    assert b"p1" not in stored.credential.password_hash


def test_register_trims_identity_fields(register, users) -> None:
    register.execute("  alice ", " alice@example.com ", "p1")

    assert users.exists("alice")
    assert users.exists("alice@example.com")


@pytest.mark.parametrize(
    ("username", "email", "password", "field"),
    [
        ("", "a@example.com", "p1", "username"),
        ("   ", "a@example.com", "p1", "username"),
        ("alice", "", "p1", "email"),
        ("alice", "a@example.com", "", "password"),
    ],
)
def test_register_rejects_empty_fields(register, users, username, email, password, field) -> None:
    with pytest.raises(ValidationError) as exc_info:
        register.execute(username, email, password)

    assert field in exc_info.value.context["fields"]
    assert len(users) == 0


def test_register_password_mismatch_writes_nothing(register, users) -> None:
    with pytest.raises(PasswordMismatchError):
        register.execute("alice", "alice@example.com", "p1", "p2")

    assert len(users) == 0


@pytest.mark.parametrize(
    ("username", "email"),
    [
        ("alice", "other@example.com"),
        ("bob", "alice@example.com"),
        ("alice@example.com", "bob@example.com"),
        ("bob", "alice"),
    ],
)
def test_register_conflicts_across_username_and_email(register, users, username, email) -> None:
    register.execute("alice", "alice@example.com", "p1")

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        register.execute(username, email, "p2")

    assert isinstance(exc_info.value, ConflictError)
    assert exc_info.value.status == 409
    assert len(users) == 1


def test_register_converts_insert_race_to_conflict(users, codec) -> None:
    class RacingRepository(type(users)):
        def exists(self, identity: str) -> bool:
            return False

        def insert(self, *args, **kwargs) -> int:
            raise DuplicateUserError()

    use_case = RegisterUserUseCase(users=RacingRepository(), codec=codec)

    with pytest.raises(UserAlreadyExistsError):
        use_case.execute("alice", "alice@example.com", "p1")


def test_authenticate_by_username_or_email(register, login) -> None:
    user_id = register.execute("alice", "alice@example.com", "p1")

    assert login.authenticate("alice", "p1") == user_id
    assert login.authenticate("alice@example.com", "p1") == user_id


def test_wrong_password_and_unknown_identity_fail_identically(register, login) -> None:
    register.execute("alice", "alice@example.com", "p1")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.authenticate("alice", "p2")
    with pytest.raises(InvalidCredentialsError) as unknown_user:
        login.authenticate("mallory", "p1")

    assert wrong_password.value.to_dict() == unknown_user.value.to_dict()
    assert wrong_password.value.status == unknown_user.value.status == 401


def test_unknown_identity_still_hashes_once(users, session_manager) -> None:
    class CountingCodec(Sha256CredentialCodec):
        calls = 0

        def hash_password(self, password: str, salt: bytes) -> bytes:
            type(self).calls += 1
            return super().hash_password(password, salt)

    codec = CountingCodec()
    use_case = LoginUserUseCase(users=users, codec=codec, sessions=session_manager)
    baseline = CountingCodec.calls

    with pytest.raises(InvalidCredentialsError):
        use_case.authenticate("ghost", "p1")

    assert CountingCodec.calls == baseline + 1


def test_login_issues_session_and_rotates_existing_token(register, login, session_manager) -> None:
    user_id = register.execute("alice", "alice@example.com", "p1")

    first = login.execute("alice", "p1")
    second = login.execute("alice", "p1", current_token=first.token)

    assert first.user_id == user_id
    assert second.renewed is True
    assert session_manager.resolve(second.token) == user_id
    with pytest.raises(SessionNotFoundError):
        session_manager.resolve(first.token)


def test_failed_login_leaves_current_session_alone(register, login, session_manager) -> None:
    register.execute("alice", "alice@example.com", "p1")
    session = login.execute("alice", "p1")

    with pytest.raises(InvalidCredentialsError):
        login.execute("alice", "wrong", current_token=session.token)

    assert session_manager.resolve(session.token) == session.user_id


def test_logout_destroys_session(register, login, session_manager: SessionManager) -> None:
    register.execute("alice", "alice@example.com", "p1")
    session = login.execute("alice", "p1")
    logout = LogoutUserUseCase(sessions=session_manager)

    logout.execute(session.token)
    logout.execute(session.token)
    logout.execute(None)

    with pytest.raises(SessionNotFoundError):
        session_manager.resolve(session.token)


def test_list_users_ascending_by_id(register, users) -> None:
    register.execute("alice", "alice@example.com", "p1")
    register.execute("bob", "bob@example.com", "p2")

    result = ListUsersUseCase(users=users).execute()

    assert result == [UserSummary(id=1, username="alice"), UserSummary(id=2, username="bob")]
