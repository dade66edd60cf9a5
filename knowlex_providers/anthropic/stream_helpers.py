"""Streaming translation for the Claude-style adapter.

Event types handled:

``message_start``
    carries ``message.usage`` (input tokens).
``content_block_start``
    opens a text, thinking or ``tool_use`` block (tool id and name).
``content_block_delta``
    ``text_delta`` -> text, ``thinking_delta`` -> reasoning,
    ``input_json_delta`` -> tool argument fragment.
``content_block_stop``
    closes a block; a finished ``tool_use`` block is emitted as a tool call.
``message_delta``
    carries cumulative output-token usage.
``message_stop``
    end of stream.
``error``
    a provider-side failure after the stream started; raised as ``APIError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..base.errors import APIError, classify_status
from ..base.models import StreamChunk, TokenUsage, ToolCall, parse_tool_arguments
from ..base.streaming import DONE, InlineReasoningSplitter
from ..base.streaming.sse import SSEEvent
from ..base.tokens import extract_anthropic_token_usage, merge_token_usage

_STREAM_ERROR_STATUS = {
    "invalid_request_error": 400,
    "authentication_error": 401,
    "permission_error": 403,
    "not_found_error": 404,
    "rate_limit_error": 429,
    "api_error": 500,
    "overloaded_error": 503,
}


@dataclass
class _ToolBlock:
    id: str
    name: str
    initial_input: Dict[str, Any] = field(default_factory=dict)
    fragments: List[str] = field(default_factory=list)

    def to_tool_call(self) -> ToolCall:
        if self.fragments:
            arguments = parse_tool_arguments("".join(self.fragments))
        else:
            arguments = dict(self.initial_input)
        return ToolCall(id=self.id, name=self.name, arguments=arguments)


class ClaudeStreamTranslator:
    """Stateful event -> chunk translator for one stream."""

    def __init__(self, *, inline_reasoning: bool = False, provider: str = "anthropic", model: Optional[str] = None) -> None:
        self._splitter = InlineReasoningSplitter() if inline_reasoning else None
        self._reasoning_channel = False
        self._tools: Dict[int, _ToolBlock] = {}
        self._usage: Optional[TokenUsage] = None
        self._done = False
        self._provider = provider
        self._model = model

    @property
    def done(self) -> bool:
        return self._done

    @property
    def usage(self) -> Optional[TokenUsage]:
        return self._usage

    def feed(self, event: SSEEvent) -> List[StreamChunk]:
        if event is DONE:
            self._done = True
            return []
        kind = event.get("type")
        if kind == "message_start":
            message = event.get("message") or {}
            self._usage = merge_token_usage(self._usage, extract_anthropic_token_usage(message))
        elif kind == "content_block_start":
            return self._block_start(event)
        elif kind == "content_block_delta":
            return self._block_delta(event)
        elif kind == "content_block_stop":
            return self._block_stop(event)
        elif kind == "message_delta":
            self._usage = merge_token_usage(self._usage, extract_anthropic_token_usage(event))
        elif kind == "message_stop":
            self._done = True
        elif kind == "error":
            self._raise_stream_error(event.get("error") or {})
        return []

    def finish(self) -> List[StreamChunk]:
        out: List[StreamChunk] = []
        if self._splitter is not None:
            out.extend(self._segments(self._splitter.flush()))
        for index in sorted(self._tools):
            out.append(StreamChunk(tool_call=self._tools[index].to_tool_call()))
        self._tools.clear()
        out.append(StreamChunk.terminal(self._usage))
        return out

    def _block_start(self, event: Dict[str, Any]) -> List[StreamChunk]:
        block = event.get("content_block") or {}
        index = event.get("index", 0)
        if block.get("type") == "tool_use":
            initial = block.get("input")
            self._tools[index] = _ToolBlock(
                id=str(block.get("id") or f"toolu_{index}"),
                name=str(block.get("name") or ""),
                initial_input=initial if isinstance(initial, dict) else {},
            )
            return []
        if block.get("type") == "text" and block.get("text"):
            return self._text(str(block["text"]))
        return []

    def _block_delta(self, event: Dict[str, Any]) -> List[StreamChunk]:
        delta = event.get("delta") or {}
        kind = delta.get("type")
        if kind == "text_delta" and delta.get("text"):
            return self._text(str(delta["text"]))
        if kind == "thinking_delta" and delta.get("thinking"):
            self._reasoning_channel = True
            return [StreamChunk(reasoning=str(delta["thinking"]))]
        if kind == "input_json_delta":
            block = self._tools.get(event.get("index", 0))
            if block is not None and delta.get("partial_json"):
                block.fragments.append(str(delta["partial_json"]))
        return []

    def _block_stop(self, event: Dict[str, Any]) -> List[StreamChunk]:
        block = self._tools.pop(event.get("index", 0), None)
        if block is None:
            return []
        return [StreamChunk(tool_call=block.to_tool_call())]

    def _text(self, text: str) -> List[StreamChunk]:
        if self._splitter is None or self._reasoning_channel:
            return [StreamChunk(text=text)]
        return self._segments(self._splitter.feed(text))

    @staticmethod
    def _segments(segments) -> List[StreamChunk]:
        return [
            StreamChunk(reasoning=text) if kind == "reasoning" else StreamChunk(text=text)
            for kind, text in segments
        ]

    def _raise_stream_error(self, error: Dict[str, Any]) -> None:
        status = _STREAM_ERROR_STATUS.get(str(error.get("type")), 500)
        raise APIError(
            str(error.get("message") or "Stream error"),
            status_code=status,
            code=classify_status(status),
            provider=self._provider,
            model=self._model,
        )


__all__ = ["ClaudeStreamTranslator"]
