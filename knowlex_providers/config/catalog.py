"""Built-in model catalog.

Declared capabilities for the models each provider family lists. Models not
in the catalog receive the family fallback from ``*_FALLBACK_CAPABILITIES``.
"""

from __future__ import annotations

from typing import Dict, List

from ..base.models import ModelCapabilities, ModelInfo


def _caps(context: int, *, vision: bool, reasoning: bool = False, tools: bool = True) -> ModelCapabilities:
    return ModelCapabilities(
        supports_vision=vision,
        supports_reasoning=reasoning,
        supports_tool_calls=tools,
        max_context_length=context,
    )


OPENAI_MODELS: Dict[str, ModelInfo] = {
    info.name: info
    for info in (
        ModelInfo("gpt-4o", "GPT-4o", _caps(128_000, vision=True)),
        ModelInfo("gpt-4o-mini", "GPT-4o mini", _caps(128_000, vision=True)),
        ModelInfo("gpt-4-turbo", "GPT-4 Turbo", _caps(128_000, vision=True)),
        ModelInfo("gpt-4", "GPT-4", _caps(8_192, vision=False)),
        ModelInfo("gpt-3.5-turbo", "GPT-3.5 Turbo", _caps(16_385, vision=False)),
        ModelInfo("o1", "o1", _caps(200_000, vision=True, reasoning=True)),
        ModelInfo("o3-mini", "o3-mini", _caps(200_000, vision=False, reasoning=True)),
    )
}

OPENAI_FALLBACK_CAPABILITIES = _caps(4_096, vision=False)

OPENAI_MODEL_PREFIXES = ("gpt-", "o1", "o3", "o4", "chatgpt-")

CLAUDE_MODELS: Dict[str, ModelInfo] = {
    info.name: info
    for info in (
        ModelInfo("claude-3-opus", "Claude 3 Opus", _caps(200_000, vision=True, reasoning=True)),
        ModelInfo("claude-3-sonnet", "Claude 3 Sonnet", _caps(200_000, vision=True, reasoning=True)),
        ModelInfo("claude-3-haiku", "Claude 3 Haiku", _caps(200_000, vision=True, reasoning=True)),
        ModelInfo("claude-3-5-sonnet", "Claude 3.5 Sonnet", _caps(200_000, vision=True, reasoning=True)),
        ModelInfo("claude-3-7-sonnet", "Claude 3.7 Sonnet", _caps(200_000, vision=True, reasoning=True)),
    )
}

CLAUDE_FALLBACK_CAPABILITIES = _caps(200_000, vision=True, reasoning=True)

CLAUDE_MODEL_PREFIXES = ("claude-",)


def list_models(catalog: Dict[str, ModelInfo]) -> List[ModelInfo]:
    return list(catalog.values())


__all__ = [
    "OPENAI_MODELS",
    "OPENAI_FALLBACK_CAPABILITIES",
    "OPENAI_MODEL_PREFIXES",
    "CLAUDE_MODELS",
    "CLAUDE_FALLBACK_CAPABILITIES",
    "CLAUDE_MODEL_PREFIXES",
    "list_models",
]
