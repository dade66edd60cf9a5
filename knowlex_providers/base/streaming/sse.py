"""Server-Sent-Events decoding for provider streams.

The body is decoded as UTF-8 incrementally, so multi-byte characters and
lines split across network chunks are reassembled before parsing. Only
``data:`` fields matter to the providers handled here; ``event:``/``id:``
fields, blank lines and ``:`` comment lines are ignored.

A single malformed JSON payload is logged and skipped; it never ends the
stream.
"""
from __future__ import annotations

import codecs
import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from ..logging import LogContext, get_logger, log_event

_logger = get_logger(__name__)

DATA_PREFIX = "data:"
DONE_MARKER = "[DONE]"


class _Done:
    """Sentinel for the explicit end-of-stream marker."""

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return "DONE"


DONE = _Done()

SSEEvent = Union[Dict[str, Any], _Done]


class SSELineDecoder:
    """Incremental bytes-to-lines decoder.

    ``feed`` returns the complete lines available so far; a trailing partial
    line stays buffered until the next ``feed`` or ``flush``.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, data: bytes) -> List[str]:
        text = self._buffer + self._decoder.decode(data)
        lines = text.split("\n")
        self._buffer = lines.pop()
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> List[str]:
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        tail = tail.rstrip("\r")
        return [tail] if tail else []


def data_payload(line: str) -> Optional[str]:
    """Return the payload of a ``data:`` line, or ``None`` for anything else."""
    if not line or line.startswith(":"):
        return None
    if not line.startswith(DATA_PREFIX):
        return None
    payload = line[len(DATA_PREFIX):]
    if payload.startswith(" "):
        payload = payload[1:]
    return payload


def iter_sse_data(chunks: Iterable[bytes]) -> Iterator[str]:
    """Yield the ``data:`` payloads found in a byte stream, in order."""
    decoder = SSELineDecoder()
    for chunk in chunks:
        for line in decoder.feed(chunk):
            payload = data_payload(line)
            if payload is not None:
                yield payload
    for line in decoder.flush():
        payload = data_payload(line)
        if payload is not None:
            yield payload


def decode_event(payload: str, ctx: LogContext | None = None) -> Optional[SSEEvent]:
    """Parse one payload into a JSON object or :data:`DONE`.

    Returns ``None`` (after logging) when the payload is not a JSON object.
    """
    text = payload.strip()
    if not text:
        return None
    if text == DONE_MARKER:
        return DONE
    try:
        value = json.loads(text)
    except ValueError as exc:
        log_event(
            _logger,
            "stream.sse.malformed",
            ctx,
            level=logging.WARNING,
            error=str(exc),
            payload=text[:200],
        )
        return None
    if not isinstance(value, dict):
        log_event(_logger, "stream.sse.malformed", ctx, level=logging.WARNING, payload=text[:200])
        return None
    return value


def iter_sse_events(chunks: Iterable[bytes], ctx: LogContext | None = None) -> Iterator[SSEEvent]:
    """Yield decoded JSON events and :data:`DONE`, skipping malformed payloads."""
    for payload in iter_sse_data(chunks):
        event = decode_event(payload, ctx)
        if event is not None:
            yield event


__all__ = [
    "DONE",
    "DONE_MARKER",
    "SSEEvent",
    "SSELineDecoder",
    "data_payload",
    "decode_event",
    "iter_sse_data",
    "iter_sse_events",
]
