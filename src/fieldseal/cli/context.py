"""Runtime settings for the command line, read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from fieldseal.core.models import SCHEMES, MarkerScheme
from fieldseal.security.keys import ENV_KEY_FILE
from fieldseal.security.keystore import DEFAULT_ACCOUNT, DEFAULT_SERVICE

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Everything a run needs except the password itself."""

    marker_attribute: str = "mode"
    marker_scheme: str = "default"
    strict: bool = False
    workers: int = 1
    log_level: int = logging.WARNING
    keyring_service: str = DEFAULT_SERVICE
    keyring_account: str = DEFAULT_ACCOUNT
    key_file: Optional[str] = None

    @property
    def scheme(self) -> MarkerScheme:
        return SCHEMES[self.marker_scheme].with_attribute(self.marker_attribute)


def _int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _level(raw: Optional[str], default: int) -> int:
    if raw is None or not raw.strip():
        return default
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"FIELDSEAL_LOG_LEVEL: unknown level {raw!r}")
    return level


def build_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Read ``FIELDSEAL_*`` variables (and ``CONFIG_MASTER_KEY_FILE``) into Settings.

    Unset variables keep the dataclass defaults; command line flags are
    applied on top by the caller.
    """
    environ = os.environ if environ is None else environ
    defaults = Settings()

    scheme = environ.get("FIELDSEAL_MARKER_SCHEME", defaults.marker_scheme).strip().lower()
    if scheme not in SCHEMES:
        raise ValueError(
            f"FIELDSEAL_MARKER_SCHEME must be one of {sorted(SCHEMES)}, got {scheme!r}"
        )

    return Settings(
        marker_attribute=environ.get("FIELDSEAL_MARKER_ATTRIBUTE", defaults.marker_attribute).strip()
        or defaults.marker_attribute,
        marker_scheme=scheme,
        strict=environ.get("FIELDSEAL_STRICT", "").strip().lower() in _TRUE,
        workers=_int(environ, "FIELDSEAL_WORKERS", defaults.workers),
        log_level=_level(environ.get("FIELDSEAL_LOG_LEVEL"), defaults.log_level),
        keyring_service=environ.get("FIELDSEAL_KEYRING_SERVICE", defaults.keyring_service),
        keyring_account=environ.get("FIELDSEAL_KEYRING_ACCOUNT", defaults.keyring_account),
        key_file=environ.get(ENV_KEY_FILE) or None,
    )
