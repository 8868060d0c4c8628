"""Tests for canonical events and the default decoder"""
import pytest

from src.core.events import IbcEvent, IbcEventType, from_tx_response_event
from src.core.height import Height
from src.core.tx_types import AbciEvent, ExecTxResult, TrackingRecord, TxStatus, all_resolved, pending_hashes


HEIGHT = Height(4, 1234)


@pytest.mark.parametrize("kind, event_type", [
    ("create_client", IbcEventType.CREATE_CLIENT),
    ("update_client", IbcEventType.UPDATE_CLIENT),
    ("connection_open_try", IbcEventType.OPEN_TRY_CONNECTION),
    ("channel_close_confirm", IbcEventType.CLOSE_CONFIRM_CHANNEL),
    ("send_packet", IbcEventType.SEND_PACKET),
    ("recv_packet", IbcEventType.RECEIVE_PACKET),
    ("write_acknowledgement", IbcEventType.WRITE_ACK),
    ("acknowledge_packet", IbcEventType.ACK_PACKET),
    ("timeout_packet", IbcEventType.TIMEOUT),
])
def test_known_events_decode_to_one_event(kind, event_type):
    raw = AbciEvent(kind, (("packet_sequence", "7"),))
    events = from_tx_response_event(HEIGHT, raw)

    assert len(events) == 1
    assert events[0].event_type == event_type
    assert events[0].height == HEIGHT
    assert events[0].attributes == {"packet_sequence": "7"}


@pytest.mark.parametrize("kind", ["transfer", "message", "coin_spent", "chain_error", ""])
def test_unknown_events_decode_to_nothing(kind):
    assert from_tx_response_event(HEIGHT, AbciEvent(kind)) == []


def test_chain_error_event():
    event = IbcEvent.chain_error("deliver_tx for AB reports error")
    assert event.is_chain_error
    assert event.height is None
    assert "ChainError" in str(event)


def test_event_str():
    event = IbcEvent(IbcEventType.SEND_PACKET, HEIGHT)
    assert str(event) == "send_packet@4-1234"
    assert not event.is_chain_error


def test_abci_event_get():
    raw = AbciEvent("send_packet", (("a", "1"), ("b", "2")))
    assert raw.get("b") == "2"
    assert raw.get("missing") is None
    assert raw.get("missing", "x") == "x"


class TestTrackingRecord:

    def test_pending_constructor(self):
        record = TrackingRecord.pending(bytearray(b"\xab" * 32), message_count=2)
        assert record.hash == b"\xab" * 32
        assert record.status == TxStatus.PENDING
        assert record.events == []
        assert record.hash_hex == "AB" * 32

    def test_message_count_must_be_positive(self):
        with pytest.raises(ValueError):
            TrackingRecord.pending(b"\x00" * 32, message_count=0)

    def test_helpers(self):
        done = TrackingRecord.pending(b"\x01" * 32)
        done.status = TxStatus.RESOLVED
        waiting = TrackingRecord.pending(b"\x02" * 32)

        assert not all_resolved([done, waiting])
        assert all_resolved([done])
        assert pending_hashes([done, waiting]) == ["02" * 32]


def test_exec_result_is_err():
    assert not ExecTxResult(code=0).is_err
    assert ExecTxResult(code=5).is_err
