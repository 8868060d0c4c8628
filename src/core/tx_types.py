"""
Tracking records and chain query results.

A TrackingRecord is created for each broadcast transaction and moves
PENDING -> RESOLVED exactly once. The tracker fills ``events`` on resolution.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .events import IbcEvent


class TxStatus(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class AbciEvent:
    """Raw chain-native event as returned by the RPC node."""
    kind: str
    attributes: Tuple[Tuple[str, str], ...] = ()

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for attr_key, value in self.attributes:
            if attr_key == key:
                return value
        return default


@dataclass(frozen=True)
class ExecTxResult:
    """Execution outcome of a transaction included in a block."""
    code: int = 0
    log: str = ""
    events: Tuple[AbciEvent, ...] = ()
    codespace: str = ""

    @property
    def is_err(self) -> bool:
        return self.code != 0


@dataclass(frozen=True)
class TxResponse:
    """Result of looking up a committed transaction by hash."""
    hash: bytes
    height: int
    tx_result: ExecTxResult


@dataclass
class TrackingRecord:
    """One broadcast transaction awaiting its on-chain result."""
    hash: bytes
    message_count: int = 1
    status: TxStatus = TxStatus.PENDING
    events: List["IbcEvent"] = field(default_factory=list)

    def __post_init__(self):
        if self.message_count < 1:
            raise ValueError(f"message_count must be >= 1, got {self.message_count}")

    @classmethod
    def pending(cls, tx_hash: bytes, message_count: int = 1) -> "TrackingRecord":
        return cls(hash=bytes(tx_hash), message_count=message_count)

    @property
    def is_resolved(self) -> bool:
        return self.status is TxStatus.RESOLVED

    @property
    def hash_hex(self) -> str:
        return self.hash.hex().upper()


def all_resolved(records: Iterable[TrackingRecord]) -> bool:
    return all(r.is_resolved for r in records)


def pending_hashes(records: Sequence[TrackingRecord]) -> List[str]:
    return [r.hash_hex for r in records if not r.is_resolved]
