"""
Transaction lookup against a Tendermint/CometBFT RPC node.

Usage:
    async with TendermintTxQuery("http://127.0.0.1:26657") as query:
        response = await query.lookup(tx_hash)   # None until committed
"""

import asyncio
import base64
import binascii
from typing import Any, Dict, List, Optional, Protocol

import aiohttp

from ..utils.logger import get_logger
from .errors import TxQueryError
from .tx_types import AbciEvent, ExecTxResult, TxResponse

logger = get_logger(__name__)


class TxQuery(Protocol):
    """Look up the on-chain result of a transaction by hash."""

    async def lookup(self, tx_hash: bytes) -> Optional[TxResponse]:
        """Return the committed result, None if not found yet; raise on transport errors."""
        ...


class TendermintTxQuery:
    """JSON-RPC ``tx_search`` client built on aiohttp."""

    HTTP_OK = 200

    def __init__(
        self,
        rpc_address: str,
        request_timeout: float = 5.0,
        base64_attributes: bool = False,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.rpc_address = rpc_address.rstrip("/")
        self.request_timeout = request_timeout
        self.base64_attributes = base64_attributes
        self._session = session
        self._owns_session = session is None
        self._request_id = 0

    @classmethod
    def from_config(cls, config) -> "TendermintTxQuery":
        return cls(
            config.rpc_address,
            request_timeout=config.request_timeout,
            base64_attributes=config.base64_attributes,
        )

    async def __aenter__(self) -> "TendermintTxQuery":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def lookup(self, tx_hash: bytes) -> Optional[TxResponse]:
        hash_hex = tx_hash.hex().upper()
        self._request_id += 1
        body = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": "tx_search",
            "params": {
                "query": f"tx.hash='{hash_hex}'",
                "prove": False,
                "page": "1",
                "per_page": "1",
                "order_by": "asc",
            },
        }

        session = self._get_session()
        try:
            async with session.post(
                self.rpc_address,
                json=body,
                timeout=aiohttp.ClientTimeout(total=self.request_timeout),
                headers={"Content-Type": "application/json"},
            ) as resp:
                if resp.status != self.HTTP_OK:
                    raise TxQueryError(f"[RPC] {self.rpc_address} HTTP {resp.status}", tx_hash)
                try:
                    data = await resp.json()
                except ValueError as e:
                    raise TxQueryError(f"[RPC] {self.rpc_address} returned invalid JSON: {e}", tx_hash) from e
        except asyncio.TimeoutError as e:
            raise TxQueryError(
                f"[RPC] {self.rpc_address} timeout ({self.request_timeout}s)", tx_hash
            ) from e
        except aiohttp.ClientError as e:
            raise TxQueryError(f"[RPC] {self.rpc_address} client error: {e}", tx_hash) from e

        return parse_tx_search_response(data, tx_hash, base64_attributes=self.base64_attributes)

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None


def parse_tx_search_response(
    data: Any,
    tx_hash: Optional[bytes] = None,
    base64_attributes: bool = False,
) -> Optional[TxResponse]:
    """Turn a ``tx_search`` JSON-RPC reply into a TxResponse (None when empty)."""
    if not isinstance(data, dict):
        raise TxQueryError(f"unexpected RPC reply: {data!r}", tx_hash)
    if data.get("error"):
        error = data["error"]
        if isinstance(error, dict):
            message = error.get("data") or error.get("message") or str(error)
        else:
            message = str(error)
        raise TxQueryError(f"RPC error: {message}", tx_hash)

    result = data.get("result")
    if not isinstance(result, dict):
        raise TxQueryError("RPC reply has no result", tx_hash)

    txs = result.get("txs") or []
    if not txs:
        return None

    try:
        tx = txs[0]
        height = int(tx["height"])
        raw_hash = tx.get("hash")
        resolved_hash = bytes.fromhex(raw_hash) if raw_hash else tx_hash
        tx_result = tx.get("tx_result") or {}
        events = tuple(
            _parse_event(event, base64_attributes) for event in tx_result.get("events") or []
        )
        exec_result = ExecTxResult(
            code=int(tx_result.get("code") or 0),
            log=tx_result.get("log") or "",
            events=events,
            codespace=tx_result.get("codespace") or "",
        )
    except (KeyError, IndexError, TypeError, AttributeError, ValueError, binascii.Error) as e:
        raise TxQueryError(f"malformed tx in RPC reply: {e}", tx_hash) from e

    return TxResponse(hash=resolved_hash or b"", height=height, tx_result=exec_result)


def _parse_event(event: Dict[str, Any], base64_attributes: bool) -> AbciEvent:
    attributes: List[tuple] = []
    for attr in event.get("attributes") or []:
        key = attr.get("key") or ""
        value = attr.get("value") or ""
        if base64_attributes:
            key = base64.b64decode(key).decode("utf-8")
            value = base64.b64decode(value).decode("utf-8")
        attributes.append((key, value))
    return AbciEvent(kind=event["type"], attributes=tuple(attributes))
