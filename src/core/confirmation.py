"""
Confirmation tracking for broadcast transactions.

Given the tracking records of transactions that were broadcast without
waiting for a block commit, poll the chain until every transaction has a
result or the time budget runs out.

Usage:
    from src.core.confirmation import wait_for_block_commits

    records = [TrackingRecord.pending(tx_hash, message_count=2)]
    try:
        await wait_for_block_commits(chain_id, query, timeout=10.0, records=records)
    except TxNoConfirmationError as e:
        ...  # records resolved before the timeout still carry their events

Loop order per pass: check resolved, check timeout, sleep the backoff, query
every pending record once. The backoff is paid before the first query.
"""

import asyncio
import time
from typing import List, Optional

from ..analytics.trace_context import ConfirmationTrace
from ..utils.logger import get_logger
from .config import DEFAULT_RPC_TIMEOUT, TrackerConfig
from .errors import TxNoConfirmationError
from .events import EventDecoder, IbcEvent, from_tx_response_event
from .height import ChainId, Height
from .tx_query import TxQuery
from .tx_types import TrackingRecord, TxResponse, TxStatus, all_resolved, pending_hashes

logger = get_logger(__name__)

WAIT_BACKOFF = 0.3  # seconds between polling passes


def chain_error_events(response: TxResponse, message_count: int) -> List[IbcEvent]:
    """One ChainError per message of a transaction that failed on-chain."""
    tx_result = response.tx_result
    message = (
        f"deliver_tx for {response.hash.hex().upper()} reports error: "
        f"code={tx_result.code}, log={tx_result.log!r}"
    )
    return [IbcEvent.chain_error(message) for _ in range(message_count)]


def resolve_record(
    chain_id: ChainId,
    record: TrackingRecord,
    response: TxResponse,
    decoder: EventDecoder = from_tx_response_event,
) -> bool:
    """
    Apply a committed result to a pending record.

    Returns False, changing nothing, if the record is already resolved.
    Raises HeightError when the response height cannot be qualified with
    the chain version.
    """
    if record.status is not TxStatus.PENDING:
        return False

    if response.tx_result.is_err:
        events = chain_error_events(response, record.message_count)
    else:
        height = Height.new(chain_id.version, response.height)
        events = [
            decoded
            for raw_event in response.tx_result.events
            for decoded in decoder(height, raw_event)
        ]

    record.events = events
    record.status = TxStatus.RESOLVED
    return True


class ConfirmationTracker:
    """
    Waits for block commits of broadcast transactions on one chain.

    Query failures for a single transaction are logged and retried on the
    next pass; only running out of time is reported to the caller.
    """

    def __init__(
        self,
        chain_id: ChainId,
        query: TxQuery,
        decoder: EventDecoder = from_tx_response_event,
        backoff: float = WAIT_BACKOFF,
        timeout: float = DEFAULT_RPC_TIMEOUT,
    ):
        self.chain_id = chain_id
        self.query = query
        self.decoder = decoder
        self.backoff = backoff
        self.timeout = timeout  # default wait budget, seconds
        self._stats = {
            "calls": 0,
            "tracked": 0,
            "resolved": 0,
            "failed_on_chain": 0,
            "query_errors": 0,
            "timeouts": 0,
        }

    @classmethod
    def from_config(
        cls,
        config: TrackerConfig,
        query: TxQuery,
        decoder: EventDecoder = from_tx_response_event,
    ) -> "ConfirmationTracker":
        return cls(
            config.chain,
            query,
            decoder=decoder,
            backoff=config.backoff,
            timeout=config.rpc_timeout,
        )

    async def wait_for_block_commits(
        self,
        records: List[TrackingRecord],
        timeout: Optional[float] = None,
    ) -> None:
        """
        Poll until every record is resolved or ``timeout`` seconds have passed.
        Without ``timeout`` the tracker budget (``rpc_timeout`` from config) applies.

        Records are updated in place and never removed or reordered.

        Raises:
            TxNoConfirmationError: some records are still pending at the deadline
            HeightError: the chain reported a height that cannot be represented
        """
        start_time = time.monotonic()
        if timeout is None:
            timeout = self.timeout
        self._stats["calls"] += 1
        self._stats["tracked"] += len(records)

        hashes = [r.hash_hex for r in records]
        trace = ConfirmationTrace.start(str(self.chain_id), hashes)
        logger.info(
            f"[TxConfirm] {self.chain_id}: waiting for commit of tx hash(es) {', '.join(hashes)}"
        )

        try:
            while True:
                elapsed = time.monotonic() - start_time

                if all_resolved(records):
                    trace.mark_completed()
                    logger.info(
                        f"[TxConfirm] {self.chain_id}: retrieved {len(records)} tx results "
                        f"after {elapsed * 1000:.0f}ms"
                    )
                    return

                if elapsed > timeout:
                    pending = pending_hashes(records)
                    self._stats["timeouts"] += 1
                    trace.mark_timed_out(pending)
                    logger.warning(
                        f"[TxConfirm] {self.chain_id}: {len(pending)}/{len(records)} tx(s) "
                        f"not confirmed after {elapsed:.2f}s"
                    )
                    raise TxNoConfirmationError(str(self.chain_id), timeout, elapsed, pending)

                await asyncio.sleep(self.backoff)

                for record in records:
                    await self._refresh(record, trace)
        finally:
            trace.finish()

    async def _refresh(self, record: TrackingRecord, trace: ConfirmationTrace) -> None:
        if record.is_resolved:
            return

        try:
            response = await self.query.lookup(record.hash)
        except Exception as e:
            # retried on the next pass, bounded by the timeout
            self._stats["query_errors"] += 1
            logger.debug(f"[TxConfirm] query for {record.hash_hex} failed: {e}")
            return

        if response is None:
            return

        resolve_record(self.chain_id, record, response, self.decoder)
        self._stats["resolved"] += 1

        failed = response.tx_result.is_err
        if failed:
            self._stats["failed_on_chain"] += 1
            logger.warning(
                f"[TxConfirm] {record.hash_hex} failed on-chain: "
                f"code={response.tx_result.code}, log={response.tx_result.log!r}"
            )
        else:
            logger.debug(
                f"[TxConfirm] {record.hash_hex} committed at height {response.height} "
                f"with {len(record.events)} event(s)"
            )
        trace.mark_resolved(record.hash_hex, height=str(response.height), failed=failed)

    def get_stats(self) -> dict:
        return dict(self._stats)


async def wait_for_block_commits(
    chain_id: ChainId,
    query: TxQuery,
    timeout: float,
    records: List[TrackingRecord],
    decoder: EventDecoder = from_tx_response_event,
    backoff: float = WAIT_BACKOFF,
) -> None:
    """Wait for the block commits of ``records``; see ConfirmationTracker."""
    tracker = ConfirmationTracker(chain_id, query, decoder=decoder, backoff=backoff, timeout=timeout)
    await tracker.wait_for_block_commits(records)


await_confirmations = wait_for_block_commits
