# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from socialauth.application.use_cases.users.login_user import LoginUserUseCase
from socialauth.application.use_cases.users.logout_user import LogoutUserUseCase
from socialauth.application.use_cases.users.register_user import RegisterUserUseCase
from socialauth.interfaces.http.dto.auth import (
    AuthSuccessDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
    RegisterSuccessDTO,
)
from socialauth.shared.config import AppConfig
from socialauth.shared.errors.validation import raise_validation_error
from socialauth.shared.logging import logger


@dataclass(slots=True, frozen=True)
class CookiePolicy:
    name: str
    max_age: int
    secure: bool
    samesite: str

    @classmethod
    def from_config(cls, config: AppConfig) -> CookiePolicy:
        return cls(
            name=config.session.cookie_name,
            max_age=config.session.ttl_seconds,
            secure=config.session_cookie_secure(),
            samesite=config.session.cookie_samesite,
        )


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        cookie: CookiePolicy,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._cookie = cookie

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user_id = self._register_use_case.execute(
            dto.username, dto.email, dto.password, dto.password_confirm
        )

        logger.info(f"auth.register: ok user_id={user_id}")
        return jsonify(RegisterSuccessDTO(id=user_id).model_dump()), 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        current_token = request.cookies.get(self._cookie.name) or None
        session = self._login_use_case.execute(dto.login, dto.password, current_token)

        response = jsonify(AuthSuccessDTO().model_dump())
        response.set_cookie(
            self._cookie.name,
            session.token,
            max_age=self._cookie.max_age,
            expires=session.expires_at,
            httponly=True,
            secure=self._cookie.secure,
            samesite=self._cookie.samesite,
            path="/",
        )
        logger.info(f"auth.login: ok user_id={session.user_id}")
        return response, 200

    def logout(self) -> tuple[Response, int]:
        self._logout_use_case.execute(request.cookies.get(self._cookie.name))

        response = jsonify(AuthSuccessDTO().model_dump())
        response.delete_cookie(
            self._cookie.name,
            path="/",
            httponly=True,
            secure=self._cookie.secure,
            samesite=self._cookie.samesite,
        )
        logger.info("auth.logout: ok")
        return response, 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        return bp
