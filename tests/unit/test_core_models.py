"""Unit tests for marker schemes, directions and the transform report."""

import pytest

from fieldseal.core.models import (
    DEFAULT_SCHEME,
    LEGACY_SCHEME,
    Direction,
    MarkerScheme,
    NodeState,
    TransformReport,
)


@pytest.mark.parametrize("value", ["PLAIN", "plain", "Plain", "  PLAIN \n"])
def test_default_scheme_parses_plain_case_insensitively(value):
    assert DEFAULT_SCHEME.parse(value) is NodeState.PLAIN


@pytest.mark.parametrize("value", ["SEALED", "sealed", " Sealed "])
def test_default_scheme_parses_sealed(value):
    assert DEFAULT_SCHEME.parse(value) is NodeState.SEALED


@pytest.mark.parametrize("value", [None, "", "PLAN", "TEXT", "ENCRYPTED", "sealed!"])
def test_unrecognized_values_are_not_eligible(value):
    assert DEFAULT_SCHEME.parse(value) is None


def test_legacy_scheme_literals():
    assert LEGACY_SCHEME.attribute == "mode"
    assert LEGACY_SCHEME.parse("text") is NodeState.PLAIN
    assert LEGACY_SCHEME.parse("Encrypted") is NodeState.SEALED
    assert LEGACY_SCHEME.parse("PLAIN") is None
    assert LEGACY_SCHEME.literal(NodeState.SEALED) == "ENCRYPTED"


def test_literal_is_canonical():
    assert DEFAULT_SCHEME.literal(NodeState.PLAIN) == "PLAIN"
    assert DEFAULT_SCHEME.literal(NodeState.SEALED) == "SEALED"


def test_with_attribute_keeps_literals():
    scheme = LEGACY_SCHEME.with_attribute("protect")
    assert scheme == MarkerScheme(attribute="protect", plain="TEXT", sealed="ENCRYPTED")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("seal", Direction.SEAL),
        ("encrypt", Direction.SEAL),
        (" OPEN ", Direction.OPEN),
        ("decrypt", Direction.OPEN),
        (Direction.OPEN, Direction.OPEN),
    ],
)
def test_direction_parse(value, expected):
    assert Direction.parse(value) is expected


def test_direction_parse_rejects_unknown():
    with pytest.raises(ValueError):
        Direction.parse("toggle")


def test_direction_states():
    assert Direction.SEAL.source_state is NodeState.PLAIN
    assert Direction.SEAL.target_state is NodeState.SEALED
    assert Direction.OPEN.source_state is NodeState.SEALED
    assert Direction.OPEN.target_state is NodeState.PLAIN


def test_report_summary_counts():
    report = TransformReport(direction=Direction.SEAL)
    report.transformed += ["/a", "/b"]
    report.skipped_empty.append("/c")
    report.skipped_unrecognized.append("/d")

    assert report.total == 4
    assert report.summary() == "seal: 2 transformed, 1 empty, 0 already sealed, 1 unrecognized"
