"""
Chain identifiers and revision-qualified block heights.

A height is the pair (revision_number, revision_height). The revision number
comes from the chain identifier, e.g. ``cosmoshub-4`` -> 4.
"""

import re
from dataclasses import dataclass
from functools import total_ordering

from .errors import HeightError

U64_MAX = 2**64 - 1

# "<name>-<version>" where version has no leading zero
_EPOCH_FORMAT = re.compile(r"^(?P<name>.*[^-])-(?P<version>[1-9][0-9]*)$")


@total_ordering
@dataclass(frozen=True)
class Height:
    """Block height qualified by the chain revision."""
    revision_number: int
    revision_height: int

    @classmethod
    def new(cls, revision_number: int, revision_height: int) -> "Height":
        """Build a validated height, raising HeightError when out of range."""
        for value in (revision_number, revision_height):
            if isinstance(value, bool) or not isinstance(value, int):
                raise HeightError(revision_number, revision_height, "not an integer")
        if not 0 <= revision_number <= U64_MAX:
            raise HeightError(revision_number, revision_height, "revision number out of range")
        if revision_height == 0:
            raise HeightError(revision_number, revision_height, "revision height cannot be zero")
        if not 0 < revision_height <= U64_MAX:
            raise HeightError(revision_number, revision_height, "revision height out of range")
        return cls(revision_number, revision_height)

    def __lt__(self, other: "Height") -> bool:
        if not isinstance(other, Height):
            return NotImplemented
        return (self.revision_number, self.revision_height) < (
            other.revision_number,
            other.revision_height,
        )

    def __str__(self) -> str:
        return f"{self.revision_number}-{self.revision_height}"


@dataclass(frozen=True)
class ChainId:
    """Chain identifier, e.g. ``osmosis-1``."""
    id: str

    @classmethod
    def from_parts(cls, name: str, version: int) -> "ChainId":
        return cls(f"{name}-{version}")

    @property
    def version(self) -> int:
        """Revision number encoded in the identifier, 0 when absent."""
        match = _EPOCH_FORMAT.match(self.id)
        if not match:
            return 0
        return int(match.group("version"))

    @property
    def name(self) -> str:
        match = _EPOCH_FORMAT.match(self.id)
        return match.group("name") if match else self.id

    def __str__(self) -> str:
        return self.id
