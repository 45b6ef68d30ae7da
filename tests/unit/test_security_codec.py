"""Unit tests for the unpadded base64 codec."""

import pytest

from fieldseal.core.exceptions import FormatError
from fieldseal.security import codec


def test_encode_strips_padding():
    assert codec.encode(b"a") == "YQ"
    assert codec.encode(b"ab") == "YWI"
    assert codec.encode(b"abc") == "YWJj"
    assert codec.encode(b"") == ""


def test_encode_uses_standard_alphabet():
    assert codec.encode(b"\xfb\xff") == "+/8"


def test_decode_accepts_unpadded_input():
    assert codec.decode("YQ") == b"a"
    assert codec.decode("YWI") == b"ab"
    assert codec.decode("+/8") == b"\xfb\xff"


def test_decode_of_encoded_random_bytes():
    data = bytes(range(256))
    assert codec.decode(codec.encode(data)) == data


@pytest.mark.parametrize("bad", ["YQ==", "YW-I", "YW_I", "Y Q", "é"])
def test_decode_rejects_foreign_characters(bad):
    with pytest.raises(FormatError):
        codec.decode(bad)


def test_decode_rejects_impossible_length():
    # 5 characters leave one dangling sextet
    with pytest.raises(FormatError):
        codec.decode("YWJjZ")
