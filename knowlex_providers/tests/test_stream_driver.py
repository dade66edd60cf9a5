"""drive_sse_stream and prime_sse_stream: ordering, single terminal chunk, cancellation and cleanup."""
from __future__ import annotations

from typing import List, Optional

import httpx
import pytest

from knowlex_providers.base.cancellation import CancellationToken
from knowlex_providers.base.errors import APIError
from knowlex_providers.base.logging import LogContext
from knowlex_providers.base.models import StreamChunk, TokenUsage
from knowlex_providers.base.streaming import DONE, drive_primed_stream, drive_sse_stream, prime_sse_stream

from .support import ChunkedStream, StallingStream, chunked_response, sse_body


class _EchoTranslator:
    """Emits the ``t`` field of each event as text."""

    def __init__(self) -> None:
        self.done = False
        self.usage: Optional[TokenUsage] = None

    def feed(self, event) -> List[StreamChunk]:
        if event is DONE:
            self.done = True
            return []
        if "usage" in event:
            self.usage = TokenUsage.from_counts(*event["usage"])
            return []
        return [StreamChunk(text=event["t"])]

    def finish(self) -> List[StreamChunk]:
        return [StreamChunk.terminal(self.usage)]


def _response(body: bytes):
    stream = ChunkedStream([body])
    return stream, chunked_response(stream)


def test_chunks_in_order_with_single_terminal():
    stream, response = _response(sse_body({"t": "a"}, {"t": "b"}, {"usage": [3, 2]}))
    chunks = list(drive_sse_stream(response, _EchoTranslator()))
    assert [c.text for c in chunks[:-1]] == ["a", "b"]  # nosec B101
    assert [c.finished for c in chunks] == [False, False, True]  # nosec B101
    assert chunks[-1].usage == TokenUsage(3, 2, 5)  # nosec B101
    assert stream.closed  # nosec B101


def test_stream_without_done_marker_still_terminates():
    stream, response = _response(sse_body({"t": "only"}, done=False))
    chunks = list(drive_sse_stream(response, _EchoTranslator()))
    assert chunks[-1].finished and chunks[0].text == "only"  # nosec B101
    assert stream.closed  # nosec B101


def test_events_after_done_are_not_read():
    stream, response = _response(sse_body({"t": "a"}) + sse_body({"t": "late"}))
    texts = [c.text for c in drive_sse_stream(response, _EchoTranslator()) if c.text]
    assert texts == ["a"]  # nosec B101


def test_cancellation_yields_terminal_and_closes_response():
    token = CancellationToken()
    stream, response = _response(sse_body({"t": "a"}, {"t": "b"}, {"t": "c"}))
    out = []
    for chunk in drive_sse_stream(response, _EchoTranslator(), token=token):
        out.append(chunk)
        if chunk.text == "a":
            token.cancel("user")
    assert [c.text for c in out] == ["a", None]  # nosec B101
    assert out[-1].finished  # nosec B101
    assert stream.closed  # nosec B101


def test_consumer_closing_early_releases_response():
    stream, response = _response(sse_body({"t": "a"}, {"t": "b"}))
    gen = drive_sse_stream(response, _EchoTranslator())
    assert next(gen).text == "a"  # nosec B101
    gen.close()
    assert stream.closed  # nosec B101


class _BrokenStream(httpx.SyncByteStream):
    def __init__(self) -> None:
        self.closed = False

    def __iter__(self):
        yield b'data: {"t": "partial"}\n\n'
        raise httpx.ReadTimeout("idle")

    def close(self) -> None:
        self.closed = True


def test_mid_stream_transport_failure_is_status_zero_api_error():
    stream = _BrokenStream()
    response = chunked_response(stream)
    seen = []
    with pytest.raises(APIError) as ei:
        for chunk in drive_sse_stream(response, _EchoTranslator(), ctx=LogContext(provider="p", model="m")):
            seen.append(chunk.text)
    assert seen == ["partial"]  # nosec B101
    assert ei.value.status_code == 0 and ei.value.provider == "p"  # nosec B101
    assert stream.closed  # nosec B101


def test_prime_reads_up_to_first_chunk_and_leaves_response_open():
    stream, response = _response(b": ping\n\n" + sse_body({"t": "a"}, {"t": "b"}))
    primed = prime_sse_stream(response, _EchoTranslator())
    assert [c.text for c in primed.pending] == ["a"]  # nosec B101
    assert not stream.closed and not primed.cancelled  # nosec B101
    chunks = list(drive_primed_stream(primed))
    assert [c.text for c in chunks] == ["a", "b", None]  # nosec B101
    assert stream.closed  # nosec B101


def test_prime_propagates_idle_timeout_before_first_chunk():
    stream = StallingStream(b": ping\n\n")
    with pytest.raises(httpx.ReadTimeout):
        prime_sse_stream(chunked_response(stream), _EchoTranslator())


def test_prime_with_cancelled_token_ends_with_terminal_only():
    token = CancellationToken()
    token.cancel("user")
    stream, response = _response(sse_body({"t": "a"}))
    primed = prime_sse_stream(response, _EchoTranslator(), token=token)
    assert primed.cancelled and primed.pending == []  # nosec B101
    chunks = list(drive_primed_stream(primed, token=token))
    assert len(chunks) == 1 and chunks[0].finished  # nosec B101
    assert stream.closed  # nosec B101
