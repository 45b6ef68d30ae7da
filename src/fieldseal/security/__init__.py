"""Security helpers: key derivation, AEAD sealing and the payload format.

This package provides:
- PBKDF2-HMAC-SHA256 key derivation from a password and a per-value salt
- AES-256-GCM sealing of single values
- the ``v1:gcm:pbkdf2:`` payload text format
- password sources (environment, key file, OS keystore) and an in-memory session
"""

from .kdf import generate_salt, derive_key, PBKDF2_ITERATIONS
from .crypto import generate_nonce, seal, unseal
from .payload import FORMAT_TAG, serialize, parse
from .encryption import seal_value, open_value
from .session import SecretSession
from .keys import resolve_password, generate_key
from .keystore import save_password, load_password, delete_password

__all__ = [
    "generate_salt",
    "derive_key",
    "PBKDF2_ITERATIONS",
    "generate_nonce",
    "seal",
    "unseal",
    "FORMAT_TAG",
    "serialize",
    "parse",
    "seal_value",
    "open_value",
    "SecretSession",
    "resolve_password",
    "generate_key",
    "save_password",
    "load_password",
    "delete_password",
]
