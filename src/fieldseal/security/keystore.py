"""OS keystore integration using keyring for optional, convenient password storage.

This module provides a tiny wrapper around `keyring` to store and retrieve
the master password under a service/account pair. Use this only for opt-in
convenience storage; do not assume keyring provides hardware-backed security
on all platforms.
"""
import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from fieldseal.core.exceptions import KeystoreError

logger = logging.getLogger(__name__)

DEFAULT_SERVICE = "fieldseal"
DEFAULT_ACCOUNT = "config-master-key"


# backend class names that keep the password unencrypted on disk or do not store it at all
_UNSAFE_BACKENDS = ("Plaintext", "Uncrypted", "Null", "Fail", "File")
# OS-provided stores the master password may go into without a second thought
_PLATFORM_BACKENDS = ("Win", "Keychain", "SecretService", "KWallet")


def assess_keyring_backend() -> tuple[bool, str]:
    """Decide whether the active keyring backend is fit to hold the master password.

    Returns ``(ok, reason)``. ``save_password`` refuses to write when ``ok``
    is false; ``fieldseal keyring check`` prints the reason. Reading is never
    gated, a stored password is always used.
    """
    try:
        backend = keyring.get_keyring()
    except Exception as e:
        return False, f"no keyring backend could be loaded: {e}"

    name = type(backend).__name__
    priority = getattr(backend, "priority", None)

    if any(marker in name for marker in _UNSAFE_BACKENDS):
        return False, f"{name} would keep the master password unprotected"
    if priority is not None and priority <= 0:
        return False, f"{name} is not usable on this system (priority={priority})"
    if any(marker in name for marker in _PLATFORM_BACKENDS):
        return True, f"{name} is an OS keystore, acceptable for the master password"
    return True, f"{name} is not a known OS keystore, use with caution (priority={priority})"


def save_password(
    password: str,
    service: str = DEFAULT_SERVICE,
    account: str = DEFAULT_ACCOUNT,
    force: bool = False,
) -> None:
    """Persist the password in the OS keystore under (service, account).

    Refuses to write to a backend that looks insecure unless ``force`` is set.
    """
    if not force:
        secure, msg = assess_keyring_backend()
        if not secure:
            raise KeystoreError(
                f"refusing to store the password in the OS keystore: {msg}; "
                "pass force=True to override if you understand the risk"
            )
    try:
        keyring.set_password(service, account, password)
    except KeyringError as e:
        raise KeystoreError(f"keystore write failed: {e.__class__.__name__}") from e


def load_password(service: str = DEFAULT_SERVICE, account: str = DEFAULT_ACCOUNT) -> Optional[str]:
    """Load the stored password; returns None when absent or when no backend is usable."""
    try:
        secret = keyring.get_password(service, account)
    except Exception as e:
        # dbus or SecretService start-up failures surface as arbitrary exceptions
        logger.debug("keystore lookup failed: %s", e.__class__.__name__)
        return None
    if secret is None or not secret.strip():
        return None
    return secret.strip()


def delete_password(service: str = DEFAULT_SERVICE, account: str = DEFAULT_ACCOUNT) -> bool:
    """Remove the stored password; returns False if nothing was stored."""
    try:
        keyring.delete_password(service, account)
    except PasswordDeleteError:
        return False
    except KeyringError as e:
        raise KeystoreError(f"keystore delete failed: {e.__class__.__name__}") from e
    return True
