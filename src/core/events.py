"""
Canonical IBC events and the default decoder for raw ABCI events.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from .height import Height
from .tx_types import AbciEvent


class IbcEventType(Enum):
    CREATE_CLIENT = "create_client"
    UPDATE_CLIENT = "update_client"
    UPGRADE_CLIENT = "upgrade_client"
    CLIENT_MISBEHAVIOUR = "client_misbehaviour"
    OPEN_INIT_CONNECTION = "connection_open_init"
    OPEN_TRY_CONNECTION = "connection_open_try"
    OPEN_ACK_CONNECTION = "connection_open_ack"
    OPEN_CONFIRM_CONNECTION = "connection_open_confirm"
    OPEN_INIT_CHANNEL = "channel_open_init"
    OPEN_TRY_CHANNEL = "channel_open_try"
    OPEN_ACK_CHANNEL = "channel_open_ack"
    OPEN_CONFIRM_CHANNEL = "channel_open_confirm"
    CLOSE_INIT_CHANNEL = "channel_close_init"
    CLOSE_CONFIRM_CHANNEL = "channel_close_confirm"
    SEND_PACKET = "send_packet"
    RECEIVE_PACKET = "recv_packet"
    WRITE_ACK = "write_acknowledgement"
    ACK_PACKET = "acknowledge_packet"
    TIMEOUT = "timeout_packet"
    CHAIN_ERROR = "chain_error"


# Raw event kinds the default decoder understands
_DECODABLE = {t.value: t for t in IbcEventType if t is not IbcEventType.CHAIN_ERROR}


@dataclass(frozen=True)
class IbcEvent:
    """Chain-agnostic event produced by a confirmed transaction."""
    event_type: IbcEventType
    height: Optional[Height] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    message: Optional[str] = None

    @classmethod
    def chain_error(cls, message: str) -> "IbcEvent":
        return cls(event_type=IbcEventType.CHAIN_ERROR, message=message)

    @property
    def is_chain_error(self) -> bool:
        return self.event_type is IbcEventType.CHAIN_ERROR

    def __str__(self) -> str:
        if self.is_chain_error:
            return f"ChainError({self.message})"
        return f"{self.event_type.value}@{self.height}"


EventDecoder = Callable[[Height, AbciEvent], Sequence[IbcEvent]]


def from_tx_response_event(height: Height, event: AbciEvent) -> List[IbcEvent]:
    """
    Decode one raw event into canonical events.

    Known IBC event kinds produce a single event carrying the raw attributes;
    anything else (bank transfers, fee events, ...) produces none. Duplicate
    attribute keys keep the last value.
    """
    event_type = _DECODABLE.get(event.kind)
    if event_type is None:
        return []
    return [IbcEvent(event_type=event_type, height=height, attributes=dict(event.attributes))]
