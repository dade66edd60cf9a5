"""Shared SSE read loop for provider adapters.

``drive_sse_stream`` owns the open HTTP response: it is closed on every exit
path, including cancellation, errors and the consumer closing the generator
early. Provider-specific parsing lives in a :class:`StreamTranslator`.

Guarantees to the consumer:

- chunks are yielded in the order the events arrived;
- exactly one ``finished`` chunk ends the stream, and nothing follows it;
- the cancellation token is checked once per received event.

Adapters open streams through :func:`prime_sse_stream`, run as the ``prime``
step of ``send_request``: events are read until the first chunk is ready, so
an idle-read timeout or reset before any output is a failed attempt of the
request and is retried with the usual backoff. A transport failure after
output was delivered surfaces as a status-0 :class:`APIError`; output already
yielded is never replayed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Protocol

import httpx

from ..cancellation import CancellationToken
from ..errors import network_error
from ..logging import LogContext, get_logger, log_event
from ..models import StreamChunk, TokenUsage
from .sse import SSEEvent, iter_sse_events

_logger = get_logger(__name__)


class StreamTranslator(Protocol):
    """Turns decoded SSE events into chunks for one provider wire format."""

    @property
    def done(self) -> bool:
        """True once the provider's end-of-stream event was seen."""
        ...

    @property
    def usage(self) -> Optional[TokenUsage]:
        ...

    def feed(self, event: SSEEvent) -> List[StreamChunk]:
        """Non-terminal chunks produced by ``event``."""
        ...

    def finish(self) -> List[StreamChunk]:
        """Remaining chunks; the last one is the terminal chunk."""
        ...


@dataclass
class PrimedStream:
    """An open stream whose first chunks were read but not yet delivered."""

    response: httpx.Response
    translator: StreamTranslator
    events: Iterator[SSEEvent]
    pending: List[StreamChunk] = field(default_factory=list)
    cancelled: bool = False


def prime_sse_stream(
    response: httpx.Response,
    translator: StreamTranslator,
    *,
    token: Optional[CancellationToken] = None,
    ctx: Optional[LogContext] = None,
) -> PrimedStream:
    """Read events until ``translator`` produces its first chunk.

    Transport errors propagate unchanged so the caller can close the response
    and retry the request. The response is left open on success.
    """
    events = iter_sse_events(response.iter_bytes(), ctx)
    pending: List[StreamChunk] = []
    for event in events:
        if token is not None and token.cancelled:
            return PrimedStream(response, translator, events, pending, cancelled=True)
        pending.extend(translator.feed(event))
        if pending or translator.done:
            break
    return PrimedStream(response, translator, events, pending)


def drive_sse_stream(
    response: httpx.Response,
    translator: StreamTranslator,
    *,
    token: Optional[CancellationToken] = None,
    ctx: Optional[LogContext] = None,
) -> Iterator[StreamChunk]:
    """Yield chunks decoded from ``response`` until the stream ends."""
    primed = PrimedStream(response, translator, iter_sse_events(response.iter_bytes(), ctx))
    return drive_primed_stream(primed, token=token, ctx=ctx)


def drive_primed_stream(
    primed: PrimedStream,
    *,
    token: Optional[CancellationToken] = None,
    ctx: Optional[LogContext] = None,
) -> Iterator[StreamChunk]:
    """Deliver the primed chunks, then keep reading until the stream ends."""
    provider = ctx.provider if ctx and ctx.provider else "-"
    model = ctx.model if ctx else None
    translator = primed.translator
    cancelled = primed.cancelled
    try:
        yield from primed.pending
        if not cancelled and not translator.done:
            try:
                for event in primed.events:
                    if token is not None and token.cancelled:
                        cancelled = True
                        break
                    yield from translator.feed(event)
                    if translator.done:
                        break
            except httpx.TransportError as exc:
                raise network_error(exc, provider=provider, model=model) from exc
    finally:
        primed.response.close()

    if cancelled:
        log_event(_logger, "stream.cancelled", ctx, reason=token.reason if token else None)
        yield StreamChunk.terminal(translator.usage)
        return
    yield from translator.finish()


__all__ = ["PrimedStream", "StreamTranslator", "drive_primed_stream", "drive_sse_stream", "prime_sse_stream"]
