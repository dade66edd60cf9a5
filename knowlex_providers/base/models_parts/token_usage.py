"""
Token usage triple.

``total_tokens`` always equals ``prompt_tokens + completion_tokens`` when both
components are known; :meth:`TokenUsage.from_counts` enforces this.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    @classmethod
    def from_counts(
        cls,
        prompt: Optional[int],
        completion: Optional[int],
        total: Optional[int] = None,
    ) -> "TokenUsage":
        """Build a usage triple, deriving ``total`` from known components."""
        if prompt is not None and completion is not None:
            total = prompt + completion
        return cls(prompt_tokens=prompt, completion_tokens=completion, total_tokens=total)

    def to_dict(self) -> Dict[str, Optional[int]]:
        """Return the compact mapping used in structured logs."""
        return {
            "prompt": self.prompt_tokens,
            "completion": self.completion_tokens,
            "total": self.total_tokens,
        }


__all__ = ["TokenUsage"]
