"""
Pytest fixtures for tx-confirmation-tracker tests
"""
import hashlib

import pytest

from src.core.height import ChainId
from src.core.tx_types import AbciEvent, ExecTxResult, TxResponse


class ScriptedTxQuery:
    """Answers lookups from a per-hash script; the last step repeats forever."""

    def __init__(self, scripts):
        self.scripts = {tx_hash: list(steps) for tx_hash, steps in scripts.items()}
        self.calls = []

    async def lookup(self, tx_hash):
        self.calls.append(tx_hash)
        steps = self.scripts.get(tx_hash, [None])
        step = steps.pop(0) if len(steps) > 1 else steps[0]
        if isinstance(step, Exception):
            raise step
        return step

    def call_count(self, tx_hash) -> int:
        return sum(1 for h in self.calls if h == tx_hash)


@pytest.fixture
def chain_id():
    return ChainId("testchain-7")


@pytest.fixture
def make_hash():
    """Deterministic 32-byte tx hash from a label"""
    def _make(label: str) -> bytes:
        return hashlib.sha256(label.encode()).digest()
    return _make


@pytest.fixture
def make_response():
    def _make(tx_hash: bytes, height: int = 100, code: int = 0, log: str = "", events=()):
        return TxResponse(
            hash=tx_hash,
            height=height,
            tx_result=ExecTxResult(code=code, log=log, events=tuple(events)),
        )
    return _make


@pytest.fixture
def send_packet_event():
    return AbciEvent(
        kind="send_packet",
        attributes=(
            ("packet_src_port", "transfer"),
            ("packet_src_channel", "channel-0"),
            ("packet_sequence", "42"),
        ),
    )


@pytest.fixture
def scripted_query():
    return ScriptedTxQuery
