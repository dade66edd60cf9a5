"""Model manager: resolution plus cached construction.

``ModelManager`` composes a :class:`ProviderRegistry` and a
:class:`ModelInstanceCache`. Neither lock is held while a provider builds a
model instance, so slow construction never blocks unrelated lookups.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..dto import ModelConfig
from ..errors import ConfigurationError, ValidationError
from ..interfaces import AIModel, AIProvider
from ..logging import LogContext, get_logger, log_event
from ..models import ModelInfo
from .model_cache import CacheStats, ModelInstanceCache, cache_key
from .provider_registry import ProviderRegistry, ProviderSummary

_logger = get_logger(__name__)


class ModelManager:
    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        cache: Optional[ModelInstanceCache] = None,
    ) -> None:
        self._registry = registry if registry is not None else ProviderRegistry()
        self._cache = cache if cache is not None else ModelInstanceCache()

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def cache(self) -> ModelInstanceCache:
        return self._cache

    def register_provider(self, provider: AIProvider) -> None:
        self._registry.register(provider)
        self._cache.invalidate_provider(provider.name)

    def unregister_provider(self, name: str) -> None:
        provider = self._registry.unregister(name)
        self._cache.invalidate_provider(provider.name)

    def resolve_provider(self, config: ModelConfig) -> AIProvider:
        return self._registry.resolve(config)

    def get_model(self, config: ModelConfig) -> AIModel:
        """Return a cached or newly built model instance for ``config``.

        Raises:
            ConfigurationError: no provider matches, or construction failed.
            ValidationError: the provider rejects the configuration.
        """
        provider = self._registry.resolve(config)
        key = cache_key(provider.name, config)
        ctx = LogContext(provider=provider.name, model=config.model)
        cached = self._cache.get(key)
        if cached is not None:
            log_event(_logger, "cache.hit", ctx)
            return cached
        log_event(_logger, "cache.miss", ctx)

        if not provider.validate_config(config):
            raise ValidationError(
                f"Invalid configuration for provider {provider.display_name}",
                provider=provider.name,
                model=config.model,
            )
        try:
            model = provider.create_model(config)
        except Exception as exc:
            raise ConfigurationError(
                f"Failed to create model {config.model}: {exc}",
                provider=provider.name,
                model=config.model,
                raw=exc,
            ) from exc
        return self._cache.put(key, model, config)

    def validate_configuration(self, config: ModelConfig) -> bool:
        """True when some registered provider accepts ``config``."""
        try:
            provider = self._registry.resolve(config)
        except ConfigurationError:
            return False
        return bool(provider.validate_config(config))

    def list_providers(self) -> List[ProviderSummary]:
        return self._registry.list_providers()

    def list_all_models(self) -> List[ModelInfo]:
        return self._registry.list_all_models()

    def provider_default_config(self, name: str) -> Dict[str, Any]:
        return self._registry.provider_default_config(name)

    def invalidate_provider(self, name: str) -> int:
        return self._cache.invalidate_provider(name)

    def cleanup_cache(self) -> int:
        return self._cache.cleanup()

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()


__all__ = ["ModelManager"]
