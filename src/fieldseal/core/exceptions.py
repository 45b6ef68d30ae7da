"""
Exceptions for FieldSeal
Everything derives from FieldSealError so callers have a single catch-all
"""

from typing import Optional


class FieldSealError(Exception):
    # general container for errors; ``node`` is the path of the offending element, if any

    def __init__(self, message: str = "", node: Optional[str] = None):
        super().__init__(message)
        self.node = node

    def __str__(self) -> str:
        message = super().__str__()
        if self.node:
            return f"{self.node}: {message}"
        return message


class FormatError(FieldSealError):
    # raised on a malformed payload string (bad tag, segment count or base64)
    pass


class AuthenticationError(FieldSealError):
    # raised when the AEAD tag does not verify: wrong password or tampered value
    pass


class CryptoError(FieldSealError):
    # raised when a primitive fails or gets parameters of the wrong size
    pass


class DocumentError(FieldSealError):
    # raised when the XML document cannot be read, parsed or written
    pass


class PasswordNotFoundError(FieldSealError):
    # raised when no password source yields a value
    pass


class KeystoreError(FieldSealError):
    # raised when the OS keystore is unavailable or refuses the operation
    pass


class UnrecognizedMarkerWarning(UserWarning):
    # emitted in strict mode for marker values that are neither literal of the scheme
    pass
