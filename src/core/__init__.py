"""Transaction confirmation tracking."""

from .confirmation import (
    WAIT_BACKOFF,
    ConfirmationTracker,
    await_confirmations,
    resolve_record,
    wait_for_block_commits,
)
from .config import TrackerConfig
from .errors import (
    ConfigError,
    HeightError,
    TxNoConfirmationError,
    TxQueryError,
    TxTrackerError,
)
from .events import IbcEvent, IbcEventType, from_tx_response_event
from .height import ChainId, Height
from .tx_query import TendermintTxQuery, TxQuery
from .tx_types import AbciEvent, ExecTxResult, TrackingRecord, TxResponse, TxStatus

__all__ = [
    # Tracker
    "WAIT_BACKOFF",
    "ConfirmationTracker",
    "await_confirmations",
    "resolve_record",
    "wait_for_block_commits",
    # Config
    "TrackerConfig",
    # Errors
    "ConfigError",
    "HeightError",
    "TxNoConfirmationError",
    "TxQueryError",
    "TxTrackerError",
    # Types
    "AbciEvent",
    "ChainId",
    "ExecTxResult",
    "Height",
    "IbcEvent",
    "IbcEventType",
    "TendermintTxQuery",
    "TrackingRecord",
    "TxQuery",
    "TxResponse",
    "TxStatus",
    "from_tx_response_event",
]
