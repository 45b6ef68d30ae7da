"""Unpadded base64 used for every segment of a sealed payload."""

import base64
import binascii
import re

from fieldseal.core.exceptions import FormatError

_ALPHABET = re.compile(r"[A-Za-z0-9+/]*")


def encode(data: bytes) -> str:
    """Standard-alphabet base64 with the trailing ``=`` padding stripped."""
    return base64.b64encode(data).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """Inverse of :func:`encode`; raises FormatError on foreign characters or impossible lengths."""
    if not _ALPHABET.fullmatch(text):
        raise FormatError("invalid base64: unexpected character")
    # a single leftover sextet can never encode a whole byte
    if len(text) % 4 == 1:
        raise FormatError("invalid base64: bad length")
    padded = text + "=" * (-len(text) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"invalid base64: {e}") from e
