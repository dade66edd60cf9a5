"""
Incremental streaming unit.

A stream yields any number of delta chunks followed by exactly one chunk with
``finished=True``; ``usage`` is only populated on that terminal chunk.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .token_usage import TokenUsage
from .tool_call import ToolCall


@dataclass(frozen=True)
class StreamChunk:
    text: Optional[str] = None
    reasoning: Optional[str] = None
    tool_call: Optional[ToolCall] = None
    finished: bool = False
    usage: Optional[TokenUsage] = None

    @classmethod
    def terminal(cls, usage: Optional[TokenUsage] = None) -> "StreamChunk":
        return cls(finished=True, usage=usage)


__all__ = ["StreamChunk"]
