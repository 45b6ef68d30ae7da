import os
from typing import Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from fieldseal.core.exceptions import CryptoError

PBKDF2_ITERATIONS = 200_000
SALT_BYTES = 16
KEY_BYTES = 32


def generate_salt(length: int = SALT_BYTES) -> bytes:
    """Return a cryptographically secure random salt."""
    return os.urandom(length)


def derive_key(
    password: Union[str, bytes, bytearray],
    salt: bytes,
    iterations: int = PBKDF2_ITERATIONS,
    key_len: int = KEY_BYTES,
) -> bytes:
    """
    Derive a symmetric key from a password using PBKDF2-HMAC-SHA256.
    Returns raw derived key bytes. Pure: same inputs give the same key.
    """
    if isinstance(password, str):
        password = password.encode("utf-8")
    if len(salt) != SALT_BYTES:
        raise CryptoError(f"salt must be {SALT_BYTES} bytes, got {len(salt)}")

    try:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=key_len,
            salt=bytes(salt),
            iterations=iterations,
        )
        return kdf.derive(password)
    except (ValueError, TypeError, MemoryError) as e:
        raise CryptoError(f"key derivation failed: {e.__class__.__name__}") from e