"""AES-256-GCM sealing primitive.

The 16-byte authentication tag is appended to the ciphertext, as returned
by :class:`cryptography.hazmat.primitives.ciphers.aead.AESGCM`. A nonce must
never repeat under one key; callers guarantee that by deriving a fresh key
from a fresh salt for every value.
"""

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from fieldseal.core.exceptions import AuthenticationError, CryptoError

KEY_BYTES = 32
NONCE_BYTES = 12
TAG_BYTES = 16


def generate_nonce() -> bytes:
    return os.urandom(NONCE_BYTES)


def _aead(key) -> AESGCM:
    if len(key) != KEY_BYTES:
        raise CryptoError(f"key must be {KEY_BYTES} bytes, got {len(key)}")
    try:
        return AESGCM(key)
    except (ValueError, TypeError) as e:
        raise CryptoError(f"cannot initialise AES-GCM: {e.__class__.__name__}") from e


def _check_nonce(nonce: bytes) -> None:
    if len(nonce) != NONCE_BYTES:
        raise CryptoError(f"nonce must be {NONCE_BYTES} bytes, got {len(nonce)}")


def seal(key, nonce: bytes, plaintext: bytes) -> bytes:
    """Encrypt and authenticate ``plaintext``; returns ``ciphertext || tag``."""
    _check_nonce(nonce)
    aead = _aead(key)
    try:
        return aead.encrypt(nonce, plaintext, None)
    except (ValueError, TypeError, OverflowError) as e:
        raise CryptoError(f"encryption failed: {e.__class__.__name__}") from e


def unseal(key, nonce: bytes, data: bytes) -> bytes:
    """
    Open a ``ciphertext || tag`` blob produced by :func:`seal`.

    Raises AuthenticationError when the tag does not verify (wrong key,
    altered nonce or tampered ciphertext) and CryptoError when the input
    is too short to hold a tag.
    """
    _check_nonce(nonce)
    if len(data) < TAG_BYTES:
        raise CryptoError("ciphertext too short to contain an authentication tag")
    aead = _aead(key)
    try:
        return aead.decrypt(nonce, data, None)
    except InvalidTag as e:
        raise AuthenticationError(
            "authentication failed: wrong password or tampered value"
        ) from e
    except (ValueError, TypeError, OverflowError) as e:
        raise CryptoError(f"decryption failed: {e.__class__.__name__}") from e
