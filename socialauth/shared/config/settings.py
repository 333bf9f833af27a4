# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


def _parse_bool(value: str | bool | None) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///socialauth.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    statement_timeout: float = Field(5.0, ge=0.1, alias="DATABASE_STATEMENT_TIMEOUT")

    model_config = _SECTION_CONFIG

    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class PasswordConfig(BaseSettings):
    scheme: Literal["scrypt", "sha256"] = Field("scrypt", alias="PASSWORD_SCHEME")
    salt_length: int = Field(32, ge=32, alias="PASSWORD_SALT_LENGTH")
    scrypt_n: int = Field(2**14, ge=2, alias="SCRYPT_N")
    scrypt_r: int = Field(8, ge=1, alias="SCRYPT_R")
    scrypt_p: int = Field(1, ge=1, alias="SCRYPT_P")

    model_config = _SECTION_CONFIG

    @field_validator("scrypt_n")
    @classmethod
    def _power_of_two(cls, value: int) -> int:
        if value & (value - 1):
            raise ValueError("SCRYPT_N must be a power of two")
        return value


class SessionConfig(BaseSettings):
    backend: Literal["database", "memory"] = Field("database", alias="SESSION_BACKEND")
    cookie_name: str = Field("socialauth_session", min_length=1, alias="SESSION_COOKIE_NAME")
    ttl_seconds: int = Field(60 * 60 * 24, ge=1, alias="SESSION_TTL")
    cookie_samesite: Literal["Lax", "Strict", "None"] = Field(
        "Lax", alias="SESSION_COOKIE_SAMESITE"
    )
    # None means "secure only in production"
    cookie_secure: bool | None = Field(None, alias="SESSION_COOKIE_SECURE")

    model_config = _SECTION_CONFIG

    @field_validator("cookie_secure", mode="before")
    @classmethod
    def _parse_secure(cls, value: str | bool | None) -> bool | None:
        return _parse_bool(value)


class SecurityConfig(BaseSettings):
    allowed_origins: Annotated[list[str], NoDecode] = Field(["http://localhost:5173"], alias="ALLOWED_ORIGINS")
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_hsts", mode="before")
    @classmethod
    def _parse_hsts(cls, value: str | bool) -> bool:
        return bool(_parse_bool(value))


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _password_config_factory() -> PasswordConfig:
    return PasswordConfig()  # type: ignore[call-arg]


def _session_config_factory() -> SessionConfig:
    return SessionConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str | None = Field(None, alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    password: PasswordConfig = Field(default_factory=_password_config_factory)
    session: SessionConfig = Field(default_factory=_session_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        validate_assignment=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return bool(_parse_bool(value))

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        warnings = []
        if self.session.cookie_secure is False:
            warnings.append("⚠️  Session cookie Secure flag is DISABLED (use HTTPS!)")
        if self.session.backend == "memory":
            warnings.append("⚠️  In-memory sessions are not shared between processes")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def session_cookie_secure(self) -> bool:
        if self.session.cookie_secure is None:
            return self.is_production()
        return self.session.cookie_secure


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "PasswordConfig",
    "SecurityConfig",
    "SessionConfig",
    "load_config",
]
