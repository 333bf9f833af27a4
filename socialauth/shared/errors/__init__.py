# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import (
    AppError,
    AuthenticationRequiredError,
    ConflictError,
    DomainError,
    EntropyError,
    InfrastructureError,
    SessionStoreError,
    SessionStoreTimeoutError,
    StorageError,
    StorageTimeoutError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "AuthenticationRequiredError",
    "ConflictError",
    "DomainError",
    "EntropyError",
    "InfrastructureError",
    "SessionStoreError",
    "SessionStoreTimeoutError",
    "StorageError",
    "StorageTimeoutError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
