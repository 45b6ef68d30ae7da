"""Canonical text form of a sealed value.

Format: ``v1:gcm:pbkdf2:<b64(salt)>:<b64(nonce)>:<b64(ciphertext)>`` with
unpadded standard base64. The tag names version, AEAD and KDF; any change of
algorithm or parameters must come with a new tag.
"""

from fieldseal.core.exceptions import FormatError
from fieldseal.core.models import Payload

from . import codec

FORMAT_TAG = "v1:gcm:pbkdf2:"
SEPARATOR = ":"


def serialize(salt: bytes, nonce: bytes, ciphertext: bytes) -> str:
    return FORMAT_TAG + SEPARATOR.join(
        (codec.encode(salt), codec.encode(nonce), codec.encode(ciphertext))
    )


def parse(text: str) -> Payload:
    """Split a payload string into its parts; all-or-nothing, raises FormatError."""
    if not isinstance(text, str) or not text.startswith(FORMAT_TAG):
        raise FormatError("unsupported payload format")
    parts = text[len(FORMAT_TAG):].split(SEPARATOR)
    if len(parts) != 3:
        raise FormatError(f"malformed payload: expected 3 segments, got {len(parts)}")
    salt, nonce, ciphertext = (codec.decode(p) for p in parts)
    return Payload(salt=salt, nonce=nonce, ciphertext=ciphertext)


def is_payload(text: str) -> bool:
    return isinstance(text, str) and text.startswith(FORMAT_TAG)
