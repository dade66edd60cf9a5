"""
Canonical response returned by ``chat`` and by the streaming consumer.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .token_usage import TokenUsage
from .tool_call import ToolCall


@dataclass(frozen=True)
class Response:
    """Complete model answer.

    Attributes:
        text: Visible answer text (reasoning markers removed).
        reasoning: Reasoning text when the model produced any.
        tool_calls: Tool invocations requested by the model.
        usage: Token accounting when the provider reported it.
    """

    text: str
    reasoning: Optional[str] = None
    tool_calls: List[ToolCall] = field(default_factory=list)
    usage: Optional[TokenUsage] = None


__all__ = ["Response"]
