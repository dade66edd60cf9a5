"""Streaming session consumer.

Drives a model's ``stream()`` iterator on behalf of one caller, forwards each
delta to a sink and assembles the final :class:`Response` from everything
accumulated (not just the terminal chunk).

State machine::

    idle -> started -> {emitting_text <-> emitting_reasoning} -> finished
    any non-terminal state -> cancelled

Cancellation is checked once per received chunk. A cancelled session stops
pulling from the stream, closes it (releasing the HTTP response) and returns
the partial response; it does not raise.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

from ..cancellation import CancellationToken
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import Message, Response, StreamChunk, TokenUsage, ToolCall
from .metrics import StreamMetrics

_logger = get_logger(__name__)


class StreamState(str, Enum):
    IDLE = "idle"
    STARTED = "started"
    EMITTING_TEXT = "emitting_text"
    EMITTING_REASONING = "emitting_reasoning"
    FINISHED = "finished"
    CANCELLED = "cancelled"


@dataclass
class StreamCallbacks:
    """Sink notifications; every callback is optional.

    ``on_finish`` receives the final response for both normal completion and
    cancellation; ``on_cancel`` additionally fires for the latter.
    """

    on_start: Optional[Callable[[], None]] = None
    on_text_start: Optional[Callable[[], None]] = None
    on_text_delta: Optional[Callable[[str], None]] = None
    on_text_end: Optional[Callable[[], None]] = None
    on_reasoning_start: Optional[Callable[[], None]] = None
    on_reasoning_delta: Optional[Callable[[str], None]] = None
    on_reasoning_end: Optional[Callable[[], None]] = None
    on_tool_call: Optional[Callable[[ToolCall], None]] = None
    on_finish: Optional[Callable[[Response], None]] = None
    on_cancel: Optional[Callable[[Response], None]] = None


@dataclass(frozen=True)
class StreamResult:
    response: Response
    cancelled: bool
    metrics: StreamMetrics = field(default_factory=StreamMetrics)


class StreamSession:
    """One-shot consumer of a chunk iterator."""

    def __init__(
        self,
        callbacks: StreamCallbacks | None = None,
        *,
        token: CancellationToken | None = None,
        ctx: LogContext | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._callbacks = callbacks or StreamCallbacks()
        self._token = token
        self._ctx = ctx
        self._clock = clock
        self._state = StreamState.IDLE
        self._text: List[str] = []
        self._reasoning: List[str] = []
        self._tool_calls: List[ToolCall] = []
        self._usage: Optional[TokenUsage] = None
        self._metrics = StreamMetrics()
        self._started_at = 0.0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def metrics(self) -> StreamMetrics:
        return self._metrics

    def consume(self, chunks: Iterable[StreamChunk]) -> StreamResult:
        """Consume ``chunks`` to completion, cancellation or error.

        Errors raised by the stream propagate after the iterator is closed.
        """
        if self._state is not StreamState.IDLE:
            raise RuntimeError("stream session already consumed")
        self._started_at = self._clock()
        self._state = StreamState.STARTED
        normalized_log_event(_logger, "stream.start", self._ctx, phase="start")
        self._call(self._callbacks.on_start)

        iterator = iter(chunks)
        try:
            if self._cancel_requested():
                return self._cancel()
            for chunk in iterator:
                if self._cancel_requested():
                    return self._cancel()
                self._apply(chunk)
                if chunk.finished:
                    return self._finish()
                if self._cancel_requested():
                    return self._cancel()
            return self._finish()
        except Exception as exc:
            self._metrics.total_duration_ms = self._elapsed_ms()
            normalized_log_event(
                _logger,
                "stream.end",
                self._ctx,
                phase="error",
                emitted=self._metrics.emitted > 0,
                error_code=getattr(getattr(exc, "code", None), "value", type(exc).__name__),
                emitted_count=self._metrics.emitted,
                duration_ms=self._metrics.total_duration_ms,
            )
            raise
        finally:
            close = getattr(iterator, "close", None)
            if callable(close):
                close()

    def _cancel_requested(self) -> bool:
        return self._token is not None and self._token.cancelled

    def _apply(self, chunk: StreamChunk) -> None:
        if chunk.reasoning:
            self._enter(StreamState.EMITTING_REASONING)
            self._reasoning.append(chunk.reasoning)
            self._delivered()
            self._call(self._callbacks.on_reasoning_delta, chunk.reasoning)
        if chunk.text:
            self._enter(StreamState.EMITTING_TEXT)
            self._text.append(chunk.text)
            self._delivered()
            self._call(self._callbacks.on_text_delta, chunk.text)
        if chunk.tool_call is not None:
            self._tool_calls.append(chunk.tool_call)
            self._call(self._callbacks.on_tool_call, chunk.tool_call)
        if chunk.usage is not None:
            self._usage = chunk.usage

    def _enter(self, state: StreamState) -> None:
        if self._state is state:
            return
        self._leave_current()
        self._state = state
        if state is StreamState.EMITTING_TEXT:
            self._call(self._callbacks.on_text_start)
        else:
            self._call(self._callbacks.on_reasoning_start)

    def _leave_current(self) -> None:
        if self._state is StreamState.EMITTING_TEXT:
            self._call(self._callbacks.on_text_end)
        elif self._state is StreamState.EMITTING_REASONING:
            self._call(self._callbacks.on_reasoning_end)

    def _delivered(self) -> None:
        if self._metrics.emitted == 0:
            self._metrics.time_to_first_token_ms = self._elapsed_ms()
        self._metrics.emitted += 1

    def _response(self) -> Response:
        reasoning = "".join(self._reasoning)
        return Response(
            text="".join(self._text),
            reasoning=reasoning or None,
            tool_calls=list(self._tool_calls),
            usage=self._usage,
        )

    def _finish(self) -> StreamResult:
        self._leave_current()
        self._state = StreamState.FINISHED
        return self._complete(cancelled=False)

    def _cancel(self) -> StreamResult:
        self._leave_current()
        self._state = StreamState.CANCELLED
        return self._complete(cancelled=True)

    def _complete(self, *, cancelled: bool) -> StreamResult:
        response = self._response()
        self._metrics.total_duration_ms = self._elapsed_ms()
        if self._usage is not None:
            self._metrics.tokens = self._usage.to_dict()
        normalized_log_event(
            _logger,
            "stream.end",
            self._ctx,
            phase="cancelled" if cancelled else "finished",
            emitted=self._metrics.emitted > 0,
            tokens=self._metrics.tokens,
            emitted_count=self._metrics.emitted,
            time_to_first_token_ms=self._metrics.time_to_first_token_ms,
            duration_ms=self._metrics.total_duration_ms,
            cancel_reason=self._token.reason if cancelled and self._token else None,
        )
        if cancelled:
            self._call(self._callbacks.on_cancel, response)
        self._call(self._callbacks.on_finish, response)
        return StreamResult(response=response, cancelled=cancelled, metrics=self._metrics)

    def _elapsed_ms(self) -> float:
        return round((self._clock() - self._started_at) * 1000.0, 3)

    @staticmethod
    def _call(callback, *args) -> None:
        if callback is not None:
            callback(*args)


def consume_stream(
    model,
    messages: Sequence[Message],
    callbacks: StreamCallbacks | None = None,
    *,
    token: CancellationToken | None = None,
) -> StreamResult:
    """Stream ``messages`` through ``model`` and consume the result.

    The same token is passed to the model so its reader also stops at the
    next event boundary.
    """
    config = model.get_config()
    ctx = LogContext(provider=getattr(model, "provider_name", None), model=config.model)
    session = StreamSession(callbacks, token=token, ctx=ctx)
    return session.consume(model.stream(messages, token))


__all__ = [
    "StreamState",
    "StreamCallbacks",
    "StreamResult",
    "StreamSession",
    "consume_stream",
]
