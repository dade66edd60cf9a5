"""Immutable model configuration DTO.

Purpose
-------
Capture everything needed to pick a provider and build a model instance:
credential, endpoint, model identifier, sampling parameters and an optional
reasoning-effort hint. Instances are frozen so a configuration handed to the
registry or cache cannot change underneath it.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for field validation and range checks.

Failure modes
-------------
- Direct construction raises ``pydantic.ValidationError``. Call sites that
  accept untrusted mappings should use :func:`load_config`, which re-raises as
  the provider-layer :class:`~knowlex_providers.base.errors.ValidationError`.

Provider-specific options
-------------------------
``extra`` carries options only one provider family understands:

- OpenAI-style: ``organization``, ``seed``, ``stop``, ``user``, ``logit_bias``
- Claude-style: ``anthropic_version``, ``stop_sequences``, ``metadata``
"""
from __future__ import annotations

from typing import Any, Dict, Literal, Mapping, Optional
from urllib.parse import urlparse

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ValidationError

ReasoningEffort = Literal["low", "medium", "high"]

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4000
MAX_TOKENS_LIMIT = 100_000


class ModelConfig(BaseModel):
    """Configuration for resolving and constructing a model instance."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: Optional[str] = None
    api_key: str = Field(repr=False)
    base_url: Optional[str] = None
    model: str
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    max_tokens: Optional[int] = Field(default=None, ge=1, le=MAX_TOKENS_LIMIT)
    frequency_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    presence_penalty: Optional[float] = Field(default=None, ge=-2.0, le=2.0)
    reasoning_effort: Optional[ReasoningEffort] = None
    extra: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("api_key", "model")
    @classmethod
    def _not_blank(cls, value: str, info) -> str:
        if not value or not value.strip():
            raise ValueError(f"{info.field_name} is required")
        return value.strip()

    @field_validator("provider", "base_url")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("base_url")
    @classmethod
    def _http_scheme(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        parsed = urlparse(value)
        if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
            raise ValueError("base_url must be an http(s) URL, e.g. https://host/v1")
        return value

    @property
    def effective_temperature(self) -> float:
        return DEFAULT_TEMPERATURE if self.temperature is None else self.temperature

    @property
    def effective_max_tokens(self) -> int:
        return DEFAULT_MAX_TOKENS if self.max_tokens is None else self.max_tokens

    def with_updates(self, **changes: Any) -> "ModelConfig":
        """Return a validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return load_config(data)


def load_config(data: Mapping[str, Any]) -> ModelConfig:
    """Build a :class:`ModelConfig` from a mapping.

    Raises:
        ValidationError: when any field is missing or out of range. The message
            lists every offending field.
    """
    try:
        return ModelConfig.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(
            f"Invalid configuration: {problems}",
            provider=str(data.get("provider") or "-"),
            model=data.get("model") if isinstance(data.get("model"), str) else None,
            raw=exc,
        ) from exc


__all__ = [
    "ModelConfig",
    "ReasoningEffort",
    "load_config",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_MAX_TOKENS",
    "MAX_TOKENS_LIMIT",
]
