# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError


def _require_text(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError("missing", f"{field} cannot be empty", {})
    return value


class RegisterRequestDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(
        max_length=64, validation_alias=AliasChoices("username", "login")
    )
    email: str = Field(max_length=254)
    password: str = Field(min_length=1, max_length=128)
    password_confirm: str | None = Field(
        None,
        max_length=128,
        validation_alias=AliasChoices("passwordConfirm", "password_confirm"),
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _require_text(value, "Username")

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = _require_text(value, "Email")
        local, sep, domain = value.partition("@")
        if not sep or not local or not domain or "@" in domain:
            raise PydanticCustomError("email_invalid", "Email address is malformed", {})
        return value


class LoginRequestDTO(BaseModel):
    login: str = Field(max_length=254, validation_alias=AliasChoices("login", "username", "email"))
    password: str = Field(min_length=1, max_length=128)

    @field_validator("login")
    @classmethod
    def validate_login(cls, value: str) -> str:
        return _require_text(value, "Login")


class RegisterSuccessDTO(BaseModel):
    ok: bool = True
    id: int


class AuthSuccessDTO(BaseModel):
    ok: bool = True


class UserSummaryDTO(BaseModel):
    id: int
    username: str
