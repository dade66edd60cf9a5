"""Pydantic DTOs validated at the library boundary."""

from .model_config import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    ModelConfig,
    ReasoningEffort,
    load_config,
)

__all__ = [
    "ModelConfig",
    "ReasoningEffort",
    "load_config",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_TEMPERATURE",
]
