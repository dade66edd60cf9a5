"""Streaming support: SSE decoding, inline reasoning and the session consumer."""

from .metrics import StreamMetrics
from .reasoning import InlineReasoningSplitter, split_inline_reasoning
from .driver import (
    PrimedStream,
    StreamTranslator,
    drive_primed_stream,
    drive_sse_stream,
    prime_sse_stream,
)
from .session import (
    StreamCallbacks,
    StreamResult,
    StreamSession,
    StreamState,
    consume_stream,
)
from .sse import DONE, SSELineDecoder, decode_event, iter_sse_data, iter_sse_events

__all__ = [
    "DONE",
    "PrimedStream",
    "StreamTranslator",
    "drive_primed_stream",
    "drive_sse_stream",
    "prime_sse_stream",
    "SSELineDecoder",
    "decode_event",
    "iter_sse_data",
    "iter_sse_events",
    "InlineReasoningSplitter",
    "split_inline_reasoning",
    "StreamCallbacks",
    "StreamMetrics",
    "StreamResult",
    "StreamSession",
    "StreamState",
    "consume_stream",
]
