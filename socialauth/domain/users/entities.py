# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class Credential:

    identity: str
    password_hash: bytes
    salt: bytes

    def __repr__(self) -> str:
        return f"Credential(identity={self.identity!r}, password_hash=<redacted>, salt=<redacted>)"


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    email: str
    credential: Credential


@dataclass(slots=True, frozen=True)
class UserSummary:

    id: int
    username: str


@dataclass(slots=True, frozen=True)
class Session:

    token: str
    user_id: int
    created_at: datetime
    expires_at: datetime
    renewed: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def __repr__(self) -> str:
        return (
            f"Session(token={self.token[:6]}…, user_id={self.user_id}, "
            f"expires_at={self.expires_at.isoformat()}, renewed={self.renewed})"
        )
