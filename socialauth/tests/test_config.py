from __future__ import annotations

import pytest
from pydantic import ValidationError

from socialauth.shared.config import AppConfig, PasswordConfig, SecurityConfig, SessionConfig
from socialauth.shared.logging.sensitive_filter import sanitize_message


def test_sections_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SESSION_COOKIE_NAME", "sid")
    monkeypatch.setenv("SESSION_TTL", "3600")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("PASSWORD_SCHEME", "sha256")

    config = AppConfig()

    assert config.session.cookie_name == "sid"
    assert config.session.ttl_seconds == 3600
    assert config.security.allowed_origins == ["https://a.example", "https://b.example"]
    assert config.password.scheme == "sha256"


def test_defaults() -> None:
    session = SessionConfig()

    assert session.ttl_seconds == 86400
    assert session.cookie_samesite == "Lax"
    assert PasswordConfig().salt_length == 32


def test_cookie_secure_follows_environment() -> None:
    dev = AppConfig(app_env="development", session=SessionConfig(cookie_secure=None))
    prod = AppConfig(
        app_env="production",
        session=SessionConfig(cookie_secure=None),
        security=SecurityConfig(enable_hsts=True),
    )

    assert dev.session_cookie_secure() is False
    assert prod.session_cookie_secure() is True


@pytest.mark.parametrize(
    "kwargs",
    [{"salt_length": 16}, {"scrypt_n": 1000}, {"scheme": "md5"}],
)
def test_password_config_rejects_weak_settings(kwargs) -> None:
    with pytest.raises(ValidationError):
        PasswordConfig(**kwargs)


@pytest.mark.parametrize(
    ("message", "secret"),
    [
        ("login attempt password=hunter2", "hunter2"),
        ("salt=deadbeefcafe", "deadbeefcafe"),
        ("postgresql://app:s3cr3t@db/app", "s3cr3t"),
        ("session=abcdefghijklmnopqrstuvwxyz012345", "abcdefghijklmnopqrstuvwxyz012345"),
    ],
)
def test_sanitizer_redacts_secrets(message: str, secret: str) -> None:
    assert secret not in sanitize_message(message)
