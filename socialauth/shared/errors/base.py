# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(self, "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(self, "status", HTTPStatus.BAD_REQUEST)
        )
        super().__init__(code=resolved_code, status=resolved_status, context=context)


class InfrastructureError(AppError):
    """Server-side failure. Never rendered to clients with its context."""

    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(code=code, status=resolved_status, context=context)


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.BAD_REQUEST,
            context=context,
        )


class ConflictError(DomainError):
    code = "conflict"
    status = HTTPStatus.CONFLICT


class StorageError(InfrastructureError):
    def __init__(self, code: str = "storage_error") -> None:
        super().__init__(code)


class StorageTimeoutError(StorageError):
    def __init__(self, code: str = "storage_timeout") -> None:
        super().__init__(code)


class SessionStoreError(StorageError):
    def __init__(self, code: str = "session_store_error") -> None:
        super().__init__(code)


class SessionStoreTimeoutError(StorageTimeoutError, SessionStoreError):
    def __init__(self, code: str = "session_store_timeout") -> None:
        StorageTimeoutError.__init__(self, code)


class EntropyError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__("entropy_unavailable")


class AuthenticationRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(code="unauthorized", status=HTTPStatus.UNAUTHORIZED)
