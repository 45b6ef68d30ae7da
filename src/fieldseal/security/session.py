"""In-memory holder for the password of one run, with guaranteed clearing.

The password is copied into a mutable ``bytearray`` so it can be zeroed when
the session is locked. Use the session as a context manager so ``lock()``
runs on every exit path::

    with SecretSession(password) as secret:
        transform(tree, secret.password, Direction.SEAL)

Python strings are immutable and may be interned, so the caller's original
``str`` cannot be wiped; this only bounds the lifetime of our own copy.
"""
from __future__ import annotations

from typing import Optional, Union

from .encryption import wipe


class SecretSession:
    def __init__(self, password: Union[str, bytes, bytearray, None] = None):
        self._password: Optional[bytearray] = None
        if password is not None:
            self.unlock(password)

    def unlock(self, password: Union[str, bytes, bytearray]) -> None:
        """Replace the held password (the previous one is wiped first)."""
        if isinstance(password, str):
            password = password.encode("utf-8")
        self.lock()
        self._password = bytearray(password)

    @property
    def unlocked(self) -> bool:
        return self._password is not None

    @property
    def password(self) -> bytearray:
        """Return the held password buffer or raise if locked."""
        if self._password is None:
            raise RuntimeError("Session is locked")
        return self._password

    def lock(self) -> None:
        """Zero the password buffer and forget it."""
        try:
            if self._password is not None:
                wipe(self._password)
        finally:
            self._password = None

    def __enter__(self) -> "SecretSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.lock()

    def __repr__(self) -> str:
        state = "unlocked" if self.unlocked else "locked"
        return f"<SecretSession {state}>"
