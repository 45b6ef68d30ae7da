"""FieldSeal: selective encryption of marked values inside XML configuration files.

Typical use::

    from fieldseal import Direction, transform
    from fieldseal.core.document import load_document, dump_document

    tree = load_document("config.xml")
    transform(tree, "MyStrongKey123", Direction.SEAL)
    dump_document(tree, "config.enc.xml")
"""

from .core.exceptions import (
    FieldSealError,
    FormatError,
    AuthenticationError,
    CryptoError,
    DocumentError,
    PasswordNotFoundError,
    KeystoreError,
)
from .core.models import Direction, NodeState, MarkerScheme, Payload, TransformReport
from .core.transformer import FieldTransformer, transform

__all__ = [
    "FieldSealError",
    "FormatError",
    "AuthenticationError",
    "CryptoError",
    "DocumentError",
    "PasswordNotFoundError",
    "KeystoreError",
    "Direction",
    "NodeState",
    "MarkerScheme",
    "Payload",
    "TransformReport",
    "FieldTransformer",
    "transform",
]

__version__ = "0.1.0"
