"""Provider registry, resolution and the model instance cache."""

from .manager import ModelManager
from .model_cache import (
    DEFAULT_MAX_ENTRIES,
    DEFAULT_TTL_SECONDS,
    CacheStats,
    ModelInstanceCache,
    cache_key,
    credential_fingerprint,
)
from .provider_registry import ProviderRegistry, ProviderSummary
from .resolution import resolve_provider

__all__ = [
    "ModelManager",
    "ModelInstanceCache",
    "CacheStats",
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_TTL_SECONDS",
    "cache_key",
    "credential_fingerprint",
    "ProviderRegistry",
    "ProviderSummary",
    "resolve_provider",
]
