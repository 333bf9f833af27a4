# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Password hashing strategies.

Both codecs hash ``password`` together with a per-user random salt into a
fixed 32-byte digest. ``Sha256CredentialCodec`` is the single-pass reference
scheme; ``ScryptCredentialCodec`` is the memory-hard default.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from abc import ABC, abstractmethod

from socialauth.domain.users.repositories import CredentialCodec
from socialauth.shared.config import PasswordConfig
from socialauth.shared.errors import EntropyError
from socialauth.shared.logging import logger

DIGEST_SIZE = 32
MIN_SALT_LENGTH = 32


def random_bytes(length: int) -> bytes:
    try:
        return secrets.token_bytes(length)
    except (OSError, NotImplementedError) as exc:
        logger.error(f"credentials: random source failed: {type(exc).__name__}")
        raise EntropyError() from exc


class _BaseCredentialCodec(CredentialCodec, ABC):
    def __init__(self, *, salt_length: int = MIN_SALT_LENGTH) -> None:
        if salt_length < MIN_SALT_LENGTH:
            raise ValueError(f"salt length must be at least {MIN_SALT_LENGTH} bytes")
        self._salt_length = salt_length

    @property
    def salt_length(self) -> int:
        return self._salt_length

    def generate_salt(self, length: int | None = None) -> bytes:
        length = self._salt_length if length is None else length
        if length < MIN_SALT_LENGTH:
            raise ValueError(f"salt length must be at least {MIN_SALT_LENGTH} bytes")
        salt = random_bytes(length)
        if len(salt) != length:
            raise EntropyError()
        return salt

    @abstractmethod
    def hash_password(self, password: str, salt: bytes) -> bytes: ...

    def verify(self, password: str, salt: bytes, expected: bytes) -> bool:
        return hmac.compare_digest(self.hash_password(password, salt), expected)


class Sha256CredentialCodec(_BaseCredentialCodec):
    def hash_password(self, password: str, salt: bytes) -> bytes:
        return hashlib.sha256(password.encode("utf-8") + salt).digest()


class ScryptCredentialCodec(_BaseCredentialCodec):
    def __init__(
        self,
        *,
        salt_length: int = MIN_SALT_LENGTH,
        n: int = 2**14,
        r: int = 8,
        p: int = 1,
    ) -> None:
        super().__init__(salt_length=salt_length)
        self._n = n
        self._r = r
        self._p = p
        # scrypt needs 128 * n * r bytes; leave headroom above that
        self._maxmem = 256 * n * r * p + 1024 * 1024

    def hash_password(self, password: str, salt: bytes) -> bytes:
        return hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt,
            n=self._n,
            r=self._r,
            p=self._p,
            maxmem=self._maxmem,
            dklen=DIGEST_SIZE,
        )


def build_credential_codec(config: PasswordConfig) -> CredentialCodec:
    if config.scheme == "sha256":
        return Sha256CredentialCodec(salt_length=config.salt_length)
    return ScryptCredentialCodec(
        salt_length=config.salt_length,
        n=config.scrypt_n,
        r=config.scrypt_r,
        p=config.scrypt_p,
    )


__all__ = [
    "DIGEST_SIZE",
    "ScryptCredentialCodec",
    "Sha256CredentialCodec",
    "build_credential_codec",
    "random_bytes",
]
