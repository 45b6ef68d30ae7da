"""Unit tests for the Key Derivation Function (KDF) module."""

import hashlib

import pytest

from fieldseal.core.exceptions import CryptoError
from fieldseal.security.kdf import PBKDF2_ITERATIONS, derive_key, generate_salt


def test_generate_salt_defaults():
    """Ensure salt generation returns bytes of the default length (16)."""
    salt = generate_salt()
    assert isinstance(salt, bytes)
    assert len(salt) == 16


def test_generate_salt_is_random():
    assert generate_salt() != generate_salt()


def test_iteration_count_is_expensive_enough():
    assert PBKDF2_ITERATIONS >= 100_000
    assert PBKDF2_ITERATIONS == 200_000


def test_derive_key_matches_pbkdf2_hmac_sha256():
    """The derived key is plain PBKDF2-HMAC-SHA256 with 200k rounds and 32 bytes."""
    salt = b"\x01" * 16
    expected = hashlib.pbkdf2_hmac("sha256", b"hunter2", salt, 200_000, dklen=32)

    assert derive_key("hunter2", salt) == expected


def test_derive_key_string_and_bytes_agree():
    """Ensure passing the same password as string, bytes or bytearray yields the same key."""
    salt = generate_salt()
    key_from_str = derive_key("pässword", salt, iterations=1000)
    key_from_bytes = derive_key("pässword".encode("utf-8"), salt, iterations=1000)
    key_from_buffer = derive_key(bytearray("pässword".encode("utf-8")), salt, iterations=1000)

    assert key_from_str == key_from_bytes == key_from_buffer
    assert len(key_from_str) == 32


def test_derive_key_depends_on_salt_and_password():
    salt = generate_salt()
    base = derive_key("pass", salt, iterations=1000)

    assert derive_key("pass", generate_salt(), iterations=1000) != base
    assert derive_key("pass2", salt, iterations=1000) != base


@pytest.mark.parametrize("length", [0, 8, 15, 17, 32])
def test_derive_key_rejects_wrong_salt_length(length):
    with pytest.raises(CryptoError):
        derive_key("pass", b"\x00" * length)
