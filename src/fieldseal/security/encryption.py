"""
Value-level sealing: password + plaintext string <-> payload string.

Every call draws a fresh salt and nonce and re-derives the key; nothing is
cached between values. Reusing a salt would mean reusing a key, and with it
the risk of repeating a (key, nonce) pair, which breaks AES-GCM.
"""

from __future__ import annotations

from typing import Union

from fieldseal.core.exceptions import CryptoError

from . import payload
from .crypto import generate_nonce, seal, unseal
from .kdf import derive_key, generate_salt

Password = Union[str, bytes, bytearray]


def wipe(buffer: bytearray) -> None:
    """Overwrite a mutable secret buffer with zeros (best-effort in CPython)."""
    for i in range(len(buffer)):
        buffer[i] = 0


def seal_value(password: Password, plaintext: str) -> str:
    """Encrypt ``plaintext`` under ``password`` and return its payload string."""
    salt = generate_salt()
    nonce = generate_nonce()
    key = bytearray(derive_key(password, salt))
    try:
        ciphertext = seal(key, nonce, plaintext.encode("utf-8"))
    finally:
        wipe(key)
    return payload.serialize(salt, nonce, ciphertext)


def open_value(password: Password, text: str) -> str:
    """
    Recover the plaintext of a payload string.

    Raises FormatError for malformed payloads, AuthenticationError for a
    wrong password or tampered ciphertext and CryptoError otherwise.
    """
    parsed = payload.parse(text)
    key = bytearray(derive_key(password, parsed.salt))
    try:
        raw = unseal(key, parsed.nonce, parsed.ciphertext)
    finally:
        wipe(key)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CryptoError("decrypted value is not valid UTF-8") from e
