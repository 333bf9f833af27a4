# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from socialauth.shared.errors.base import ConflictError, DomainError


class UserAlreadyExistsError(ConflictError):
    code = "user_already_exists"


class DuplicateUserError(DomainError):
    """Raised by the user store when a unique constraint rejects an insert."""

    code = "duplicate_user"
    status = HTTPStatus.CONFLICT


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND


class PasswordMismatchError(DomainError):
    code = "password_mismatch"


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class SessionError(DomainError):
    code = "session_invalid"
    status = HTTPStatus.UNAUTHORIZED


class SessionNotFoundError(SessionError):
    code = "session_not_found"


class SessionExpiredError(SessionError):
    code = "session_expired"
