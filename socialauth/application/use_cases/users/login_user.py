# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from socialauth.application.services.session_manager import SessionManager
from socialauth.domain.users.entities import Session
from socialauth.domain.users.exceptions import InvalidCredentialsError, UserNotFoundError
from socialauth.domain.users.repositories import CredentialCodec, UserRepository
from socialauth.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        codec: CredentialCodec,
        sessions: SessionManager,
    ) -> None:
        self._users = users
        self._codec = codec
        self._sessions = sessions
        # Unknown identities are hashed against this so they cost the same.
        self._dummy_salt = codec.generate_salt()
        self._dummy_hash = codec.hash_password("", self._dummy_salt)

    def authenticate(self, identity: str, password: str) -> int:
        try:
            user = self._users.find_by_identity(identity)
        except UserNotFoundError:
            self._codec.verify(password, self._dummy_salt, self._dummy_hash)
            logger.warning("auth: rejected login (unknown identity)")
            raise InvalidCredentialsError() from None

        credential = user.credential
        if not self._codec.verify(password, credential.salt, credential.password_hash):
            logger.warning(f"auth: rejected login user_id={user.id}")
            raise InvalidCredentialsError()

        return user.id

    def execute(self, identity: str, password: str, current_token: str | None = None) -> Session:
        user_id = self.authenticate(identity, password)
        session = self._sessions.issue_or_renew(user_id, current_token)
        logger.info(f"auth: ok user_id={user_id} renewed={session.renewed}")
        return session
