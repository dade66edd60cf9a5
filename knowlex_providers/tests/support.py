"""Test helpers: canned SSE bodies, a request recorder and a fake clock."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterator, List, Sequence, Union

import httpx

Handler = Callable[[httpx.Request], httpx.Response]


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def sse_body(*events: Union[Dict[str, Any], str], done: bool = True) -> bytes:
    """Encode events as an SSE body; strings are sent as raw ``data:`` payloads."""
    lines = []
    for event in events:
        payload = event if isinstance(event, str) else json.dumps(event)
        lines.append(f"data: {payload}\n\n")
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


def sse_response(body: bytes, status: int = 200) -> httpx.Response:
    return httpx.Response(status, headers={"content-type": "text/event-stream"}, content=body)


class ChunkedStream(httpx.SyncByteStream):
    """Body delivered in fixed chunks; records whether it was closed."""

    def __init__(self, chunks: Sequence[bytes]) -> None:
        self._chunks = list(chunks)
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        yield from self._chunks

    def close(self) -> None:
        self.closed = True


def chunked_response(stream: ChunkedStream, status: int = 200) -> httpx.Response:
    return httpx.Response(status, headers={"content-type": "text/event-stream"}, stream=stream)


def _fresh(template: httpx.Response) -> httpx.Response:
    """Copy of a buffered canned response so it can be served repeatedly."""
    try:
        content = template.content
    except httpx.ResponseNotRead:
        return template
    return httpx.Response(template.status_code, headers=template.headers, content=content)


class Recorder:
    """MockTransport handler replaying canned responses and recording requests.

    The last canned item repeats once the list is exhausted. Exceptions are
    raised and callables are invoked with the request.
    """

    def __init__(self, *responses: Union[httpx.Response, Handler, Exception]) -> None:
        self._responses = list(responses)
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self._responses[min(len(self.requests), len(self._responses)) - 1]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return _fresh(item)
        return item(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def json_body(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)


def json_response(payload: Any, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json=payload)


class StallingStream(httpx.SyncByteStream):
    """Body that sends ``prefix`` and then times out waiting for more data."""

    def __init__(self, prefix: bytes = b"") -> None:
        self._prefix = prefix
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        if self._prefix:
            yield self._prefix
        raise httpx.ReadTimeout("no data within the read timeout")

    def close(self) -> None:
        self.closed = True
