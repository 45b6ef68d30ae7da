"""
Data models shared by the payload codec and the field transformer
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class NodeState(Enum):
    # The two observable states of a protected element
    PLAIN = "plain"
    SEALED = "sealed"


class Direction(Enum):
    # What a transform run does to eligible elements
    SEAL = "seal"
    OPEN = "open"

    @classmethod
    def parse(cls, value: "str | Direction") -> "Direction":
        # accepts the CLI verbs as well as the enum values
        if isinstance(value, Direction):
            return value
        normalized = value.strip().lower()
        if normalized in ("seal", "encrypt"):
            return cls.SEAL
        if normalized in ("open", "decrypt"):
            return cls.OPEN
        raise ValueError(f"unknown direction: {value!r}")

    @property
    def source_state(self) -> NodeState:
        return NodeState.PLAIN if self is Direction.SEAL else NodeState.SEALED

    @property
    def target_state(self) -> NodeState:
        return NodeState.SEALED if self is Direction.SEAL else NodeState.PLAIN


@dataclass(frozen=True)
class MarkerScheme:
    """
    Names the marker attribute and the two literals it may carry.

    Marker values are matched case-insensitively after trimming; the value
    written back is always the canonical literal of the scheme.
    """

    attribute: str = "mode"
    plain: str = "PLAIN"
    sealed: str = "SEALED"

    def parse(self, value: Optional[str]) -> Optional[NodeState]:
        """Return the state a marker value denotes, or None when it is not recognized."""
        if value is None:
            return None
        normalized = value.strip().upper()
        if normalized == self.plain.upper():
            return NodeState.PLAIN
        if normalized == self.sealed.upper():
            return NodeState.SEALED
        return None

    def literal(self, state: NodeState) -> str:
        return self.plain if state is NodeState.PLAIN else self.sealed

    def with_attribute(self, attribute: str) -> "MarkerScheme":
        return MarkerScheme(attribute=attribute, plain=self.plain, sealed=self.sealed)


DEFAULT_SCHEME = MarkerScheme()
# literals written by the first generation of the tool
LEGACY_SCHEME = MarkerScheme(plain="TEXT", sealed="ENCRYPTED")

SCHEMES: Dict[str, MarkerScheme] = {
    "default": DEFAULT_SCHEME,
    "legacy": LEGACY_SCHEME,
}


@dataclass(frozen=True)
class Payload:
    # One sealed value: KDF salt, AEAD nonce and ciphertext with its 16-byte tag appended
    salt: bytes
    nonce: bytes
    ciphertext: bytes


@dataclass
class TransformReport:
    """Outcome counters of one transform run; node paths only, never values."""

    direction: Direction
    transformed: List[str] = field(default_factory=list)
    skipped_empty: List[str] = field(default_factory=list)
    skipped_in_state: List[str] = field(default_factory=list)
    skipped_unrecognized: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            len(self.transformed)
            + len(self.skipped_empty)
            + len(self.skipped_in_state)
            + len(self.skipped_unrecognized)
        )

    def summary(self) -> str:
        return (
            f"{self.direction.value}: {len(self.transformed)} transformed, "
            f"{len(self.skipped_empty)} empty, "
            f"{len(self.skipped_in_state)} already {self.direction.target_state.value}, "
            f"{len(self.skipped_unrecognized)} unrecognized"
        )
