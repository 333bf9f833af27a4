# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from socialauth.application.use_cases.users.list_users import ListUsersUseCase
from socialauth.interfaces.http.access import AccessMiddleware
from socialauth.interfaces.http.dto.auth import UserSummaryDTO


class UsersController:
    def __init__(self, *, list_users: ListUsersUseCase, access: AccessMiddleware) -> None:
        self._list_users = list_users
        self._access = access

    def list_users(self) -> tuple[Response, int]:
        users = self._list_users.execute()
        payload = [UserSummaryDTO(id=u.id, username=u.username).model_dump() for u in users]
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api")
        bp.add_url_rule("/users", view_func=self.list_users, methods=["GET"])
        return self._access.protect(bp)
