"""Runtime table of provider implementations.

The registry is an ordinary object: construct one per application (or per
test). Registration validates the provider shape; re-registering a name
replaces the previous implementation and logs a warning.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..dto import ModelConfig
from ..errors import ConfigurationError
from ..interfaces import REQUIRED_PROVIDER_OPERATIONS, AIProvider
from ..logging import get_logger, log_event
from ..models import ModelInfo
from .resolution import canonical_provider_name, resolve_provider

_logger = get_logger(__name__)


@dataclass(frozen=True)
class ProviderSummary:
    name: str
    display_name: str
    models: List[ModelInfo]


class ProviderRegistry:
    """Thread-safe name -> provider mapping with resolution."""

    def __init__(self) -> None:
        self._providers: Dict[str, AIProvider] = {}
        self._lock = threading.RLock()

    def register(self, provider: AIProvider) -> None:
        """Add or replace ``provider``.

        Raises:
            ConfigurationError: when the name/label is empty or a required
                operation is missing.
        """
        name = getattr(provider, "name", None)
        label = getattr(provider, "display_name", None)
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("Provider must have a non-empty name")
        if not isinstance(label, str) or not label.strip():
            raise ConfigurationError(f"Provider {name} must have a non-empty display name", provider=name)
        missing = [op for op in REQUIRED_PROVIDER_OPERATIONS if not callable(getattr(provider, op, None))]
        if missing:
            raise ConfigurationError(
                f"Provider {name} is missing required operations: {', '.join(missing)}",
                provider=name,
            )
        key = canonical_provider_name(name)
        with self._lock:
            replaced = key in self._providers
            self._providers[key] = provider
        if replaced:
            log_event(_logger, "registry.replace", level=logging.WARNING, provider=key, display_name=label)
        else:
            log_event(_logger, "registry.register", provider=key, display_name=label)

    def unregister(self, name: str) -> AIProvider:
        key = canonical_provider_name(name)
        with self._lock:
            provider = self._providers.pop(key, None)
        if provider is None:
            raise ConfigurationError(f"Provider '{name}' is not registered", provider=name)
        log_event(_logger, "registry.unregister", provider=key)
        return provider

    def get(self, name: str) -> Optional[AIProvider]:
        with self._lock:
            return self._providers.get(canonical_provider_name(name))

    def require(self, name: str) -> AIProvider:
        provider = self.get(name)
        if provider is None:
            raise ConfigurationError(f"Provider '{name}' is not registered", provider=name)
        return provider

    def providers(self) -> List[AIProvider]:
        """Snapshot of the registered providers in registration order."""
        with self._lock:
            return list(self._providers.values())

    def names(self) -> List[str]:
        with self._lock:
            return list(self._providers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)

    def resolve(self, config: ModelConfig) -> AIProvider:
        return resolve_provider(self.providers(), config)

    def list_providers(self) -> List[ProviderSummary]:
        return [
            ProviderSummary(name=p.name, display_name=p.display_name, models=list(p.supported_models()))
            for p in self.providers()
        ]

    def list_all_models(self) -> List[ModelInfo]:
        """Every supported model, tagged with its provider name."""
        out: List[ModelInfo] = []
        for p in self.providers():
            for info in p.supported_models():
                out.append(ModelInfo(info.name, info.display_name, info.capabilities, provider=p.name))
        return out

    def provider_default_config(self, name: str) -> Dict[str, Any]:
        return dict(self.require(name).default_config())


__all__ = ["ProviderRegistry", "ProviderSummary"]
