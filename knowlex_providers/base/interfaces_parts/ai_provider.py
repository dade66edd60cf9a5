"""AIProvider Protocol (single-class module).

One implementation exists per provider family. The registry checks the four
required operations plus ``name``/``display_name`` at registration time.
"""

from __future__ import annotations

from typing import Any, Dict, List, Protocol, runtime_checkable

from ..dto import ModelConfig
from ..models import ModelCapabilities, ModelInfo
from .ai_model import AIModel

REQUIRED_PROVIDER_OPERATIONS = ("create_model", "validate_config", "default_config", "supported_models")


@runtime_checkable
class AIProvider(Protocol):
    """Factory and metadata for one provider family."""

    name: str
    display_name: str

    def create_model(self, config: ModelConfig) -> AIModel:
        """Construct a model instance; may raise on invalid setup."""
        ...

    def validate_config(self, config: ModelConfig) -> bool:
        """Return True when ``config`` can be served by this provider."""
        ...

    def default_config(self) -> Dict[str, Any]:
        ...

    def supported_models(self) -> List[ModelInfo]:
        ...

    def model_capabilities(self, model: str) -> ModelCapabilities:
        """Capabilities for ``model``, with family defaults for unknown names."""
        ...


__all__ = ["AIProvider", "REQUIRED_PROVIDER_OPERATIONS"]
