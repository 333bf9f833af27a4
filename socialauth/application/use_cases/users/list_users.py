# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from socialauth.domain.users.entities import UserSummary
from socialauth.domain.users.repositories import UserRepository


class ListUsersUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self) -> list[UserSummary]:
        return list(self._users.list_users())


__all__ = ["ListUsersUseCase"]
