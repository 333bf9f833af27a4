# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Credential, Session, User, UserSummary
from .exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    PasswordMismatchError,
    SessionError,
    SessionExpiredError,
    SessionNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

__all__ = [
    "Credential",
    "DuplicateUserError",
    "InvalidCredentialsError",
    "PasswordMismatchError",
    "Session",
    "SessionError",
    "SessionExpiredError",
    "SessionNotFoundError",
    "User",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserSummary",
]
