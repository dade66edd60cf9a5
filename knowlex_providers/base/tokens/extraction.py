"""Token usage extraction from decoded provider payloads.

Maps provider-specific usage field names onto :class:`TokenUsage`:

OpenAI-style ``usage``:
    ``prompt_tokens``, ``completion_tokens``, ``total_tokens``
Claude-style ``usage``:
    ``input_tokens``, ``output_tokens`` (no total; derived)

Both helpers never raise. They return ``None`` when the payload carries no
usable counts, and coerce negative or non-numeric values to ``None``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..models import TokenUsage


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        iv = int(value)
    except (TypeError, ValueError):
        return None
    return iv if iv >= 0 else None


def _usage_block(payload: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(payload, Mapping):
        return None
    usage = payload.get("usage", payload)
    return usage if isinstance(usage, Mapping) else None


def extract_openai_token_usage(payload: Any) -> Optional[TokenUsage]:
    """Read ``usage`` from an OpenAI-style response or stream event."""
    usage = _usage_block(payload)
    if usage is None:
        return None
    prompt = _coerce_int(usage.get("prompt_tokens"))
    completion = _coerce_int(usage.get("completion_tokens"))
    total = _coerce_int(usage.get("total_tokens"))
    if prompt is None and completion is None and total is None:
        return None
    return TokenUsage.from_counts(prompt, completion, total)


def extract_anthropic_token_usage(payload: Any) -> Optional[TokenUsage]:
    """Read ``usage`` from a Claude-style response or stream event."""
    usage = _usage_block(payload)
    if usage is None:
        return None
    prompt = _coerce_int(usage.get("input_tokens"))
    completion = _coerce_int(usage.get("output_tokens"))
    if prompt is None and completion is None:
        return None
    return TokenUsage.from_counts(prompt, completion)


def merge_token_usage(current: Optional[TokenUsage], update: Optional[TokenUsage]) -> Optional[TokenUsage]:
    """Combine partial usage reports (streams report prompt and completion separately)."""
    if update is None:
        return current
    if current is None:
        return update
    prompt = update.prompt_tokens if update.prompt_tokens is not None else current.prompt_tokens
    completion = (
        update.completion_tokens if update.completion_tokens is not None else current.completion_tokens
    )
    return TokenUsage.from_counts(prompt, completion, update.total_tokens)


__all__ = [
    "extract_openai_token_usage",
    "extract_anthropic_token_usage",
    "merge_token_usage",
]
