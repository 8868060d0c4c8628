"""
ConfirmationTrace - tracing of one wait-for-confirmation call.
trace_id is carried through contextvars so every log line emitted while
waiting is tagged with it.
"""

import uuid
import time
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone

_current_trace: ContextVar[Optional['ConfirmationTrace']] = ContextVar('current_trace', default=None)


@dataclass
class TraceEvent:
    """Single event inside a trace"""
    stage: str                    # started, resolved, timed_out, completed
    timestamp_mono: float
    timestamp_wall: str
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def now(cls, stage: str, **data) -> 'TraceEvent':
        return cls(
            stage=stage,
            timestamp_mono=time.monotonic(),
            timestamp_wall=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            data=data
        )


@dataclass
class ConfirmationTrace:
    """Trace of waiting for a batch of transactions on one chain"""
    trace_id: str
    chain_id: str
    hashes: List[str] = field(default_factory=list)
    events: list = field(default_factory=list)

    t_start: Optional[float] = None
    t_end: Optional[float] = None

    resolved: Dict[str, float] = field(default_factory=dict)  # hash -> latency ms
    outcome: Optional[str] = None  # 'confirmed' | 'timeout'
    _token: Optional[Token] = field(default=None, repr=False)

    @classmethod
    def start(cls, chain_id: str, hashes: List[str]) -> 'ConfirmationTrace':
        """Create a trace and bind it to the current context"""
        trace = cls(
            trace_id=str(uuid.uuid4())[:12],
            chain_id=chain_id,
            hashes=list(hashes),
            t_start=time.monotonic()
        )
        trace.add_event('started', count=len(trace.hashes))
        trace._token = _current_trace.set(trace)
        return trace

    def add_event(self, stage: str, **data) -> None:
        self.events.append(TraceEvent.now(stage, **data))

    def mark_resolved(self, tx_hash: str, height: Optional[str] = None, failed: bool = False) -> None:
        """Record the moment a transaction result was obtained"""
        latency_ms = (time.monotonic() - self.t_start) * 1000 if self.t_start else None
        self.resolved[tx_hash] = latency_ms
        self.add_event('resolved', hash=tx_hash, height=height, failed=failed, latency_ms=latency_ms)

    def mark_completed(self) -> None:
        self.t_end = time.monotonic()
        self.outcome = 'confirmed'
        self.add_event('completed')

    def mark_timed_out(self, pending: List[str]) -> None:
        self.t_end = time.monotonic()
        self.outcome = 'timeout'
        self.add_event('timed_out', pending=list(pending))

    def finish(self) -> None:
        """Restore whichever trace was bound before start()"""
        if self._token is not None:
            _current_trace.reset(self._token)
            self._token = None

    @property
    def total_latency_ms(self) -> Optional[float]:
        if self.t_start and self.t_end:
            return (self.t_end - self.t_start) * 1000
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialisation for JSONL"""
        return {
            'trace_id': self.trace_id,
            'chain_id': self.chain_id,
            'hashes': self.hashes,
            'outcome': self.outcome,
            'resolved': self.resolved,
            'total_ms': self.total_latency_ms,
            'events': [
                {
                    'stage': e.stage,
                    'timestamp': e.timestamp_wall,
                    'data': e.data
                }
                for e in self.events
            ]
        }


def get_current_trace() -> Optional[ConfirmationTrace]:
    return _current_trace.get()


def get_trace_id() -> Optional[str]:
    """Current trace_id (used by the log filter)"""
    trace = _current_trace.get()
    return trace.trace_id if trace else None
