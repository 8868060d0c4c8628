"""
Exceptions raised by the confirmation tracker.
"""

from typing import Iterable, Optional


class TxTrackerError(Exception):
    """Base class for tracker errors."""
    pass


class ConfigError(TxTrackerError, ValueError):
    """Invalid tracker configuration."""
    pass


class HeightError(TxTrackerError):
    """A block height could not be built from revision number and height."""

    def __init__(self, revision_number: int, revision_height: int, reason: str):
        self.revision_number = revision_number
        self.revision_height = revision_height
        self.reason = reason
        super().__init__(
            f"invalid height {revision_number}-{revision_height}: {reason}"
        )


class TxQueryError(TxTrackerError):
    """Transient failure while querying a transaction by hash."""

    def __init__(self, message: str, tx_hash: Optional[bytes] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class TxNoConfirmationError(TxTrackerError):
    """Not every transaction was confirmed before the timeout elapsed."""

    def __init__(
        self,
        chain_id: str,
        timeout: float,
        elapsed: float,
        pending_hashes: Iterable[str] = (),
    ):
        self.chain_id = chain_id
        self.timeout = timeout
        self.elapsed = elapsed
        self.pending_hashes = list(pending_hashes)
        super().__init__(
            f"[{chain_id}] failed to confirm {len(self.pending_hashes)} tx(s) "
            f"within {timeout:.2f}s (elapsed {elapsed:.2f}s)"
        )
