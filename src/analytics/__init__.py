"""Tracing of confirmation waits"""

from .trace_context import (
    ConfirmationTrace,
    TraceEvent,
    get_current_trace,
    get_trace_id
)

__all__ = [
    'ConfirmationTrace',
    'TraceEvent',
    'get_current_trace',
    'get_trace_id',
]
