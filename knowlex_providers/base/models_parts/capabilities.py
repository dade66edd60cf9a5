"""
Declared per-model capabilities.

Attached to a model instance when it is constructed and never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelCapabilities:
    """Feature flags and limits for a model.

    Attributes:
        supports_vision: Accepts image content parts.
        supports_reasoning: Produces reasoning content (first-class or inline).
        supports_tool_calls: Can request tool invocations.
        max_context_length: Context window in tokens.
    """

    supports_vision: bool = False
    supports_reasoning: bool = False
    supports_tool_calls: bool = True
    max_context_length: int = 4096


__all__ = ["ModelCapabilities"]
