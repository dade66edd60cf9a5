"""Streaming translation for the OpenAI-style adapter.

Each ``chat.completion.chunk`` event may carry a content delta, a reasoning
delta (``reasoning_content``), tool-call fragments and, on the final event
when ``stream_options.include_usage`` is set, a usage block with empty
``choices``. Tool-call fragments arrive split by ``index``: the first
fragment holds ``id`` and ``function.name``, later ones append to
``function.arguments``. Completed calls are emitted just before the terminal
chunk.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..base.models import (
    StreamChunk,
    TokenUsage,
    ToolCall,
    encode_tool_arguments,
    parse_tool_arguments,
)
from ..base.streaming import DONE, InlineReasoningSplitter
from ..base.streaming.sse import SSEEvent
from ..base.tokens import extract_openai_token_usage, merge_token_usage


@dataclass
class _ToolFragment:
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: List[str] = field(default_factory=list)


class OpenAIStreamTranslator:
    """Stateful event -> chunk translator for one stream."""

    def __init__(self, *, inline_reasoning: bool = False) -> None:
        self._splitter = InlineReasoningSplitter() if inline_reasoning else None
        self._reasoning_channel = False
        self._tools: Dict[int, _ToolFragment] = {}
        self._usage: Optional[TokenUsage] = None
        self._done = False
        self.finish_reason: Optional[str] = None

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
        if event.get("usage"):
            self._usage = merge_token_usage(self._usage, extract_openai_token_usage(event))
        out: List[StreamChunk] = []
        choices = event.get("choices") or []
        if not choices:
            return out
        choice = choices[0] or {}
        delta = choice.get("delta") or {}
        reasoning = delta.get("reasoning_content") or delta.get("reasoning")
        if isinstance(reasoning, str) and reasoning:
            self._reasoning_channel = True
            out.append(StreamChunk(reasoning=reasoning))
        content = delta.get("content")
        if isinstance(content, str) and content:
            out.extend(self._text(content))
        for fragment in delta.get("tool_calls") or []:
            self._accumulate(fragment or {})
        if choice.get("finish_reason"):
            self.finish_reason = choice["finish_reason"]
        return out

    def finish(self) -> List[StreamChunk]:
        out: List[StreamChunk] = []
        if self._splitter is not None:
            out.extend(self._segments(self._splitter.flush()))
        for index in sorted(self._tools):
            fragment = self._tools[index]
            if not fragment.name:
                continue
            call = ToolCall(
                id=fragment.id or f"call_{index}",
                name=fragment.name,
                arguments=parse_tool_arguments("".join(fragment.arguments)),
            )
            out.append(StreamChunk(tool_call=call))
        out.append(StreamChunk.terminal(self._usage))
        return out

    def _text(self, content: str) -> List[StreamChunk]:
        if self._splitter is None or self._reasoning_channel:
            return [StreamChunk(text=content)]
        return self._segments(self._splitter.feed(content))

    @staticmethod
    def _segments(segments) -> List[StreamChunk]:
        return [
            StreamChunk(reasoning=text) if kind == "reasoning" else StreamChunk(text=text)
            for kind, text in segments
        ]

    def _accumulate(self, fragment: dict) -> None:
        index = fragment.get("index", 0)
        slot = self._tools.setdefault(index, _ToolFragment())
        if fragment.get("id"):
            slot.id = str(fragment["id"])
        fn = fragment.get("function") or {}
        if fn.get("name"):
            slot.name = str(fn["name"])
        arguments = fn.get("arguments")
        if isinstance(arguments, dict):
            slot.arguments.append(encode_tool_arguments(arguments))
        elif arguments:
            slot.arguments.append(str(arguments))


__all__ = ["OpenAIStreamTranslator"]
