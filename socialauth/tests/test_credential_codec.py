from __future__ import annotations

import hashlib

import pytest

from socialauth.application.services import credential_codec as codec_module
from socialauth.application.services.credential_codec import (
    _BaseCredentialCodec,
    ScryptCredentialCodec,
    Sha256CredentialCodec,
    build_credential_codec,
)
from socialauth.shared.config import PasswordConfig
from socialauth.shared.errors import EntropyError


@pytest.fixture(params=["sha256", "scrypt"])
def any_codec(request: pytest.FixtureRequest):
    if request.param == "sha256":
        return Sha256CredentialCodec()
    return ScryptCredentialCodec(n=1024)


def test_hash_is_deterministic_and_fixed_length(any_codec) -> None:
    salt = any_codec.generate_salt()

    first = any_codec.hash_password("p1", salt)
    second = any_codec.hash_password("p1", salt)

    assert first == second
    assert len(first) == 32


def test_different_salts_give_unrelated_hashes(any_codec) -> None:
    salt_a = any_codec.generate_salt()
    salt_b = any_codec.generate_salt()

    assert salt_a != salt_b
    assert any_codec.hash_password("p1", salt_a) != any_codec.hash_password("p1", salt_b)


def test_verify_accepts_only_the_registered_password(any_codec) -> None:
    salt = any_codec.generate_salt()
    stored = any_codec.hash_password("correct horse", salt)

    assert any_codec.verify("correct horse", salt, stored) is True
    assert any_codec.verify("correct horsE", salt, stored) is False
    assert any_codec.verify("", salt, stored) is False


def test_sha256_matches_reference_scheme() -> None:
    codec = Sha256CredentialCodec()
    salt = bytes(range(32))

    expected = hashlib.sha256(b"p1" + salt).digest()

    assert codec.hash_password("p1", salt) == expected


def test_salt_defaults_to_32_bytes_and_rejects_shorter() -> None:
    codec = Sha256CredentialCodec()

    assert len(codec.generate_salt()) == 32
    assert len(codec.generate_salt(48)) == 48
    with pytest.raises(ValueError):
        codec.generate_salt(16)
    with pytest.raises(ValueError):
        Sha256CredentialCodec(salt_length=8)


def test_entropy_failure_is_surfaced(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken(_: int) -> bytes:
        raise OSError("no entropy")

    monkeypatch.setattr(codec_module.secrets, "token_bytes", _broken)

    with pytest.raises(EntropyError):
        Sha256CredentialCodec().generate_salt()


def test_build_codec_follows_config() -> None:
    assert isinstance(build_credential_codec(PasswordConfig(scheme="sha256")), Sha256CredentialCodec)
    scrypt = build_credential_codec(PasswordConfig(scheme="scrypt", scrypt_n=1024, salt_length=40))
    assert isinstance(scrypt, ScryptCredentialCodec)
    assert scrypt.salt_length == 40


def test_base_codec_requires_a_hash_scheme() -> None:
    with pytest.raises(TypeError):
        _BaseCredentialCodec()
