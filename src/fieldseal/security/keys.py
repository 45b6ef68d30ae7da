"""Where the master password comes from.

Sources are tried in a fixed order: an explicit value, the
``CONFIG_MASTER_KEY`` environment variable, a key file, the OS keystore and
finally an interactive prompt. The first non-blank value wins.
"""

from __future__ import annotations

import base64
import getpass
import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from fieldseal.core.exceptions import PasswordNotFoundError

from .keystore import DEFAULT_ACCOUNT, DEFAULT_SERVICE, load_password

ENV_KEY_NAME = "CONFIG_MASTER_KEY"
ENV_KEY_FILE = "CONFIG_MASTER_KEY_FILE"
GENERATED_KEY_BYTES = 32

logger = logging.getLogger(__name__)


def password_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    environ = os.environ if environ is None else environ
    value = environ.get(ENV_KEY_NAME)
    if value is None or not value.strip():
        return None
    return value.strip()


def password_from_file(path: str | Path) -> str:
    """Read a password from a mounted secret file, trimming surrounding whitespace."""
    value = Path(path).expanduser().read_text(encoding="utf-8").strip()
    if not value:
        raise PasswordNotFoundError(f"key file is empty: {path}")
    return value


def resolve_password(
    explicit: Optional[str] = None,
    key_file: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    use_keyring: bool = True,
    keyring_service: str = DEFAULT_SERVICE,
    keyring_account: str = DEFAULT_ACCOUNT,
    prompt: bool = True,
) -> str:
    """
    Return the first password available from the configured sources.

    Raises PasswordNotFoundError if none yields a value. Only the name of the
    winning source is logged.
    """
    environ = os.environ if environ is None else environ

    if explicit is not None and explicit.strip():
        logger.debug("password taken from command line")
        return explicit

    value = password_from_env(environ)
    if value is not None:
        logger.debug("password taken from %s", ENV_KEY_NAME)
        return value

    key_file = key_file or environ.get(ENV_KEY_FILE)
    if key_file:
        try:
            value = password_from_file(key_file)
        except OSError as e:
            raise PasswordNotFoundError(f"cannot read key file {key_file}: {e.strerror}") from e
        except UnicodeDecodeError as e:
            raise PasswordNotFoundError(f"key file {key_file} is not valid UTF-8") from e
        logger.debug("password taken from key file %s", key_file)
        return value

    if use_keyring:
        value = load_password(keyring_service, keyring_account)
        if value is not None:
            logger.debug("password taken from OS keystore (%s/%s)", keyring_service, keyring_account)
            return value

    if prompt and sys.stdin is not None and sys.stdin.isatty():
        value = getpass.getpass("Master password: ")
        if value:
            return value

    raise PasswordNotFoundError(
        f"no password given. Pass --pass, set {ENV_KEY_NAME}, point "
        f"{ENV_KEY_FILE} at a key file or store one with 'fieldseal keyring set'."
    )


def generate_key(length: int = GENERATED_KEY_BYTES) -> str:
    """Return a random high-entropy password, base64-encoded with padding."""
    return base64.b64encode(os.urandom(length)).decode("ascii")
