# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from collections.abc import Mapping

from flask import Flask, Response, g, request

from socialauth.shared.logging import clear_correlation_id, logger, set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"

# Values are replaced with a short digest so repeated requests stay correlatable.
_HASHED_HEADERS = frozenset(
    {"authorization", "cookie", "set-cookie", "x-api-key", "x-auth-token", "x-session-id"}
)
_REDACTED_PARAM_MARKERS = ("password", "token", "secret", "session", "salt", "hash")


def _fingerprint(value: str) -> str:
    return f"<hashed:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def _safe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: _fingerprint(value) if key.lower() in _HASHED_HEADERS else value
        for key, value in headers.items()
    }


def _safe_params(params: Mapping[str, str]) -> dict[str, str]:
    return {
        key: "<redacted>" if any(m in key.lower() for m in _REDACTED_PARAM_MARKERS) else value
        for key, value in params.items()
    }


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    """Log one line per request start/end and tag log records with a request id.

    The id comes from an incoming ``X-Request-ID`` header when present and is
    echoed back on the response.
    """

    @app.before_request
    def _start() -> None:
        request_id = (request.headers.get(REQUEST_ID_HEADER) or secrets.token_urlsafe(8))[:64]
        set_correlation_id(request_id)
        g.request_id = request_id
        g.request_started = time.perf_counter()

        if debug_mode:
            logger.debug(
                f"--> {request.method} {request.path} from {_client_ip()} "
                f"query={_safe_params(request.args)} headers={_safe_headers(request.headers)} "
                f"body_size={request.content_length or 0}"
            )
        else:
            logger.info(f"--> {request.method} {request.path} from {_client_ip()}")

    @app.after_request
    def _finish(response: Response) -> Response:
        started = getattr(g, "request_started", None)
        elapsed = time.perf_counter() - started if started is not None else 0.0
        user = getattr(g, "user_id", None)
        logger.info(
            f"<-- {request.method} {request.path} status={response.status_code} "
            f"duration={elapsed:.3f}s user={user if user is not None else '-'}"
        )
        if "request_id" in g:
            response.headers.setdefault(REQUEST_ID_HEADER, g.request_id)
        return response

    @app.teardown_request
    def _teardown(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"request failed: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging"]
