"""Per-stream metrics collected by the session consumer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Collected metrics for one consumed stream.

    Attributes:
        emitted: Number of text/reasoning deltas forwarded to the sink.
        time_to_first_token_ms: Delay between start and the first delta.
        total_duration_ms: Delay between start and the end of consumption.
        tokens: Canonical usage mapping from the terminal chunk, if any.
    """

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    tokens: Optional[Dict[str, Any]] = None


__all__ = ["StreamMetrics"]
