# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine

from socialauth.application.services.credential_codec import build_credential_codec
from socialauth.application.services.session_manager import SessionManager
from socialauth.application.use_cases.users.list_users import ListUsersUseCase
from socialauth.application.use_cases.users.login_user import LoginUserUseCase
from socialauth.application.use_cases.users.logout_user import LogoutUserUseCase
from socialauth.application.use_cases.users.register_user import RegisterUserUseCase
from socialauth.domain.users.repositories import CredentialCodec, SessionStore, UserRepository
from socialauth.infrastructure.db import SessionFactory, build_session_factory
from socialauth.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemySessionStore,
    SqlAlchemyUserRepository,
)
from socialauth.infrastructure.sessions.in_memory import InMemorySessionStore
from socialauth.interfaces.http.access import AccessMiddleware
from socialauth.interfaces.http.controllers.auth_controller import AuthController, CookiePolicy
from socialauth.interfaces.http.controllers.misc_controller import MiscController
from socialauth.interfaces.http.controllers.users_controller import UsersController
from socialauth.shared.config import AppConfig


class Container:
    """Wires stores, services and controllers for one application instance."""

    def __init__(self, *, config: AppConfig, engine: Engine) -> None:
        self.config = config
        self.engine = engine

    @cached_property
    def session_factory(self) -> SessionFactory:
        return build_session_factory(self.engine)

    @cached_property
    def credential_codec(self) -> CredentialCodec:
        return build_credential_codec(self.config.password)

    @cached_property
    def user_repository(self) -> UserRepository:
        return SqlAlchemyUserRepository(self.session_factory)

    @cached_property
    def session_store(self) -> SessionStore:
        if self.config.session.backend == "memory":
            return InMemorySessionStore()
        return SqlAlchemySessionStore(self.session_factory)

    @cached_property
    def session_manager(self) -> SessionManager:
        return SessionManager(
            store=self.session_store,
            ttl=timedelta(seconds=self.config.session.ttl_seconds),
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(users=self.user_repository, codec=self.credential_codec)

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            codec=self.credential_codec,
            sessions=self.session_manager,
        )

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(sessions=self.session_manager)

    @cached_property
    def list_users_use_case(self) -> ListUsersUseCase:
        return ListUsersUseCase(users=self.user_repository)

    @cached_property
    def access_middleware(self) -> AccessMiddleware:
        return AccessMiddleware(
            sessions=self.session_manager,
            cookie_name=self.config.session.cookie_name,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            cookie=CookiePolicy.from_config(self.config),
        )

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(list_users=self.list_users_use_case, access=self.access_middleware)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)
