# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, cast

from flask import Blueprint, g, request

from socialauth.application.services.session_manager import SessionManager
from socialauth.domain.users.exceptions import SessionError
from socialauth.shared.errors import AuthenticationRequiredError
from socialauth.shared.logging import logger


def current_user_id() -> int:
    """User id resolved by :class:`AccessMiddleware` for this request."""
    return cast(int, g.user_id)


class AccessMiddleware:
    def __init__(self, *, sessions: SessionManager, cookie_name: str) -> None:
        self._sessions = sessions
        self._cookie_name = cookie_name

    def authorize(self) -> None:
        # preflights carry no cookies; flask-cors answers them
        if request.method == "OPTIONS":
            return
        token =request.cookies.get(self._cookie_name, "")
        if not token:
            logger.warning(
                f"No session cookie on {request.method} {request.path} "
                f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
            )
            raise AuthenticationRequiredError()

        try:
            user_id = self._sessions.resolve(token)
        except SessionError as exc:
            logger.warning(f"Auth failed ({exc.code}) on {request.method} {request.path}")
            raise AuthenticationRequiredError() from exc

        g.user_id = user_id
        logger.debug(f"Auth OK: user={user_id} {request.method} {request.path}")

    def protect(self, blueprint: Blueprint) -> Blueprint:
        """Guard every route of ``blueprint``."""
        blueprint.before_request(self.authorize)
        return blueprint

    def required(self, f: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(f)
        def inner(*a: Any, **kw: Any) -> Any:
            self.authorize()
            return f(*a, **kw)

        return inner


__all__ = ["AccessMiddleware", "current_user_id"]
