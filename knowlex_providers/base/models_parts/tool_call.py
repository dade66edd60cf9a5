"""
Tool call model plus argument (de)serialization helpers.

Providers transmit tool arguments as a JSON string. ``parse_tool_arguments``
never raises: a string that is not a JSON object is preserved under the
``raw`` key so the call is not lost.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class ToolCall:
    """A model-requested tool invocation."""

    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


def parse_tool_arguments(raw: Any) -> Dict[str, Any]:
    """Decode a tool-call argument string.

    Returns an empty mapping for empty input and ``{"raw": raw}`` when the
    string is not a JSON object. Some compatible endpoints send the arguments
    already decoded: a mapping is returned as is, any other value is wrapped.
    """
    if isinstance(raw, dict):
        return raw
    if raw is None:
        return {}
    if not isinstance(raw, str):
        return {"raw": raw}
    if not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except ValueError:
        return {"raw": raw}
    if isinstance(value, dict):
        return value
    return {"raw": raw}


def encode_tool_arguments(arguments: Dict[str, Any]) -> str:
    """Encode tool arguments to the JSON string form providers expect."""
    return json.dumps(arguments, ensure_ascii=False)


__all__ = ["ToolCall", "parse_tool_arguments", "encode_tool_arguments"]
