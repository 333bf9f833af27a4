# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hmac

from socialauth.domain.users.exceptions import (
    DuplicateUserError,
    PasswordMismatchError,
    UserAlreadyExistsError,
)
from socialauth.domain.users.repositories import CredentialCodec, UserRepository
from socialauth.shared.errors import ValidationError
from socialauth.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        codec: CredentialCodec,
    ) -> None:
        self._users = users
        self._codec = codec

    def execute(
        self,
        username: str,
        email: str,
        password: str,
        password_confirm: str | None = None,
    ) -> int:
        username = (username or "").strip()
        email = (email or "").strip()
        missing = [
            name
            for name, value in (("username", username), ("email", email), ("password", password))
            if not value
        ]
        if missing:
            raise ValidationError(context={"fields": missing})

        if password_confirm is not None and not hmac.compare_digest(
            password.encode("utf-8"), password_confirm.encode("utf-8")
        ):
            raise PasswordMismatchError()

        # Fast path only: the unique indexes decide.
        if self._users.exists(username) or self._users.exists(email):
            logger.warning(f"register: identity already taken username={username}")
            raise UserAlreadyExistsError()

        salt = self._codec.generate_salt()
        password_hash = self._codec.hash_password(password, salt)

        try:
            user_id = self._users.insert(username, email, password_hash, salt)
        except DuplicateUserError as exc:
            logger.warning(f"register: lost insert race username={username}")
            raise UserAlreadyExistsError() from exc

        logger.info(f"register: ok user_id={user_id}")
        return user_id
