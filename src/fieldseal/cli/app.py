"""
Command line entry point.

    fieldseal encrypt --in config.xml --out config.enc.xml --pass MyStrongKey123
    fieldseal decrypt --in config.enc.xml --out config.dec.xml
    fieldseal generate-key
    fieldseal keyring set|delete|check

Without ``--pass`` the password is taken from ``CONFIG_MASTER_KEY``, a key
file, the OS keystore or an interactive prompt, in that order.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from fieldseal.core.document import dump_document, load_document
from fieldseal.core.exceptions import (
    DocumentError,
    FieldSealError,
    KeystoreError,
    PasswordNotFoundError,
)
from fieldseal.core.models import SCHEMES, Direction
from fieldseal.core.transformer import FieldTransformer
from fieldseal.security.keys import ENV_KEY_NAME, generate_key, resolve_password
from fieldseal.security.keystore import (
    assess_keyring_backend,
    delete_password,
    save_password,
)
from fieldseal.security.session import SecretSession

from .context import Settings, build_settings
from .logging_config import configure_logging

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_IO = 3

logger = logging.getLogger("fieldseal.cli")


def _add_transform_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--in", dest="in_path", required=True, help="Input XML file")
    parser.add_argument("--out", dest="out_path", required=True, help="Output XML file")
    parser.add_argument(
        "--pass",
        dest="password",
        default=None,
        help=f"Master password (default: ${ENV_KEY_NAME}, key file, keystore or prompt)",
    )
    parser.add_argument("--key-file", default=None, help="File holding the master password")
    parser.add_argument(
        "--attribute",
        default=None,
        help="Name of the marker attribute (default: mode)",
    )
    parser.add_argument(
        "--scheme",
        choices=sorted(SCHEMES),
        default=None,
        help="Marker literals: default = PLAIN/SEALED, legacy = TEXT/ENCRYPTED",
    )
    parser.add_argument(
        "--legacy-markers",
        action="store_const",
        const="legacy",
        dest="scheme",
        help="Shorthand for --scheme legacy",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Warn about marker values that are neither literal of the scheme",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads used for key derivation (default: 1)",
    )
    parser.add_argument("--no-keyring", action="store_true", help="Do not consult the OS keystore")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fieldseal",
        description="Encrypt or decrypt marked values inside an XML configuration file.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output (-vv for debug)")
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encrypt", help="Seal every element marked as plaintext")
    _add_transform_arguments(enc)
    dec = sub.add_parser("decrypt", help="Open every element marked as sealed")
    _add_transform_arguments(dec)

    sub.add_parser("generate-key", help=f"Print a random {ENV_KEY_NAME} value")

    kr = sub.add_parser("keyring", help="Manage the password stored in the OS keystore")
    kr.add_argument("action", choices=("set", "delete", "check"))
    kr.add_argument("--pass", dest="password", default=None, help="Password to store (default: prompt)")
    kr.add_argument("--force", action="store_true", help="Store even if the backend looks insecure")
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    # flags win over environment
    if getattr(args, "attribute", None):
        settings.marker_attribute = args.attribute
    if getattr(args, "scheme", None):
        settings.marker_scheme = args.scheme
    if getattr(args, "strict", None):
        settings.strict = True
    if getattr(args, "workers", None) is not None:
        settings.workers = args.workers
    if getattr(args, "key_file", None):
        settings.key_file = args.key_file
    if args.verbose == 1:
        settings.log_level = min(settings.log_level, logging.INFO)
    elif args.verbose > 1:
        settings.log_level = logging.DEBUG
    return settings


def _run_transform(args: argparse.Namespace, settings: Settings) -> int:
    direction = Direction.parse(args.command)
    if settings.workers < 1:
        print("error: --workers must be at least 1", file=sys.stderr)
        return EXIT_USAGE

    try:
        password = resolve_password(
            explicit=args.password,
            key_file=settings.key_file,
            use_keyring=not args.no_keyring,
            keyring_service=settings.keyring_service,
            keyring_account=settings.keyring_account,
        )
    except PasswordNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        tree = load_document(args.in_path)
    except DocumentError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_IO

    transformer = FieldTransformer(
        scheme=settings.scheme,
        strict=settings.strict,
        workers=settings.workers,
    )
    with SecretSession(password) as secret:
        del password
        try:
            transformer.transform(tree, secret.password, direction)
        except FieldSealError as e:
            # nothing is written; the input stays the only copy on disk
            print(f"error: {e}", file=sys.stderr)
            return EXIT_FAILED

    try:
        dump_document(tree, args.out_path)
    except DocumentError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_IO

    report = transformer.last_report
    if report is not None:
        logger.info(report.summary())
    print(f"Done -> {args.out_path}")
    return EXIT_OK


def _run_keyring(args: argparse.Namespace, settings: Settings) -> int:
    service, account = settings.keyring_service, settings.keyring_account
    try:
        if args.action == "check":
            secure, msg = assess_keyring_backend()
            print(msg)
            return EXIT_OK if secure else EXIT_FAILED
        if args.action == "delete":
            removed = delete_password(service, account)
            print("Removed." if removed else "Nothing stored.")
            return EXIT_OK
        password = args.password or getpass.getpass("Password to store: ")
        if not password.strip():
            print("error: refusing to store an empty password", file=sys.stderr)
            return EXIT_USAGE
        save_password(password, service, account, force=args.force)
        print(f"Stored under {service}/{account}.")
        return EXIT_OK
    except KeystoreError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILED


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    try:
        settings = _apply_overrides(build_settings(), args)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    configure_logging(settings.log_level)

    if args.command == "generate-key":
        print(f"{ENV_KEY_NAME}={generate_key()}")
        return EXIT_OK
    if args.command == "keyring":
        return _run_keyring(args, settings)
    return _run_transform(args, settings)


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
