"""Unit tests for the payload text format."""

import re

import pytest

from fieldseal.core.exceptions import FormatError
from fieldseal.core.models import Payload
from fieldseal.security import codec
from fieldseal.security.payload import FORMAT_TAG, is_payload, parse, serialize

PAYLOAD_RE = re.compile(r"^v1:gcm:pbkdf2:[A-Za-z0-9+/]+:[A-Za-z0-9+/]+:[A-Za-z0-9+/]+$")

SALT = bytes(range(16))
NONCE = bytes(range(100, 112))
CT = b"\xff" * 20


def test_format_tag():
    assert FORMAT_TAG == "v1:gcm:pbkdf2:"


def test_serialize_layout():
    text = serialize(SALT, NONCE, CT)

    assert PAYLOAD_RE.match(text)
    assert "=" not in text
    assert text == FORMAT_TAG + ":".join(codec.encode(p) for p in (SALT, NONCE, CT))


def test_parse_returns_parts():
    parsed = parse(serialize(SALT, NONCE, CT))

    assert parsed == Payload(salt=SALT, nonce=NONCE, ciphertext=CT)


def test_parse_known_vector():
    text = "v1:gcm:pbkdf2:AAAAAAAAAAAAAAAAAAAAAA:AQEBAQEBAQEBAQEB:/w"
    parsed = parse(text)

    assert parsed.salt == b"\x00" * 16
    assert parsed.nonce == b"\x01" * 12
    assert parsed.ciphertext == b"\xff"


def test_parse_rejects_missing_tag():
    with pytest.raises(FormatError):
        parse("not-a-valid-payload")


def test_parse_rejects_other_version():
    text = serialize(SALT, NONCE, CT).replace("v1:", "v2:", 1)
    with pytest.raises(FormatError):
        parse(text)


def test_parse_rejects_two_segments():
    with pytest.raises(FormatError):
        parse(FORMAT_TAG + codec.encode(SALT) + ":" + codec.encode(NONCE))


def test_parse_rejects_four_segments():
    with pytest.raises(FormatError):
        parse(serialize(SALT, NONCE, CT) + ":AAAA")


def test_parse_rejects_bad_base64_segment():
    with pytest.raises(FormatError):
        parse(FORMAT_TAG + codec.encode(SALT) + ":" + codec.encode(NONCE) + ":***")


def test_parse_rejects_non_string():
    with pytest.raises(FormatError):
        parse(None)


def test_is_payload():
    assert is_payload(serialize(SALT, NONCE, CT))
    assert not is_payload("secret123")
