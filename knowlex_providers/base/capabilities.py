"""Capability-driven request policy.

Decides which optional request features apply to a given model so adapters do
not send parameters a model cannot honour.
"""
from __future__ import annotations

from typing import Optional

from .dto import ModelConfig
from .errors import ValidationError
from .models import ModelCapabilities

REASONING_EFFORTS = ("low", "medium", "high")


def resolve_reasoning_effort(config: ModelConfig, capabilities: ModelCapabilities) -> Optional[str]:
    """Return the reasoning effort to send, or ``None``.

    The hint is dropped for models without reasoning support.
    """
    effort = config.reasoning_effort
    if effort is None:
        return None
    if effort not in REASONING_EFFORTS:
        raise ValidationError(
            f"Invalid reasoning effort {effort!r}; expected one of {', '.join(REASONING_EFFORTS)}",
            model=config.model,
        )
    if not capabilities.supports_reasoning:
        return None
    return effort



__all__ = ["REASONING_EFFORTS", "resolve_reasoning_effort"]
