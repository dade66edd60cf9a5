"""Composition root.

Builds the process-wide :class:`ModelManager` with the two built-in providers
registered, and exposes ``resolve_and_get_model`` as the single entry point
for application code. Libraries and tests should construct their own
``ModelManager`` instead of relying on this module's shared instance.

The periodic cache cleanup timer also lives here: the cache itself never
schedules work.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping, Optional, Union

from .anthropic import ClaudeProvider
from .base.dto import ModelConfig, load_config
from .base.interfaces import AIModel
from .base.logging import get_logger, log_event
from .base.registry import ModelInstanceCache, ModelManager, ProviderRegistry
from .config.defaults import CACHE_CLEANUP_INTERVAL_SECONDS
from .openai import OpenAIProvider

_logger = get_logger(__name__)

_DEFAULT_MANAGER: Optional[ModelManager] = None
_MANAGER_LOCK = threading.Lock()
_CLEANUP_TIMER: Optional[threading.Timer] = None
_TIMER_LOCK = threading.Lock()


def create_default_registry() -> ProviderRegistry:
    registry = ProviderRegistry()
    registry.register(OpenAIProvider())
    registry.register(ClaudeProvider())
    return registry


def create_manager(
    registry: Optional[ProviderRegistry] = None,
    cache: Optional[ModelInstanceCache] = None,
) -> ModelManager:
    """New manager; the built-in providers are registered when no registry is given."""
    if registry is None:
        registry = create_default_registry()
    return ModelManager(registry, cache)


def get_default_manager() -> ModelManager:
    global _DEFAULT_MANAGER
    if _DEFAULT_MANAGER is None:
        with _MANAGER_LOCK:
            if _DEFAULT_MANAGER is None:
                _DEFAULT_MANAGER = create_manager()
    return _DEFAULT_MANAGER


def set_default_manager(manager: Optional[ModelManager]) -> None:
    """Replace (or with ``None`` reset) the shared manager."""
    global _DEFAULT_MANAGER
    with _MANAGER_LOCK:
        _DEFAULT_MANAGER = manager


def resolve_and_get_model(config: Union[ModelConfig, Mapping[str, Any]]) -> AIModel:
    """Resolve ``config`` to a provider and return a (cached) model instance.

    ``config`` may be a :class:`ModelConfig` or a plain mapping, which is
    validated first.
    """
    if not isinstance(config, ModelConfig):
        config = load_config(config)
    return get_default_manager().get_model(config)


def _schedule_cleanup(manager: ModelManager, interval_seconds: float) -> None:
    global _CLEANUP_TIMER
    timer = threading.Timer(interval_seconds, _run_cleanup, args=(manager, interval_seconds))
    timer.daemon = True
    _CLEANUP_TIMER = timer
    timer.start()


def _run_cleanup(manager: ModelManager, interval_seconds: float) -> None:
    try:
        manager.cleanup_cache()
    finally:
        with _TIMER_LOCK:
            # a stopped or replaced timer must not reschedule itself
            if _CLEANUP_TIMER is threading.current_thread():
                _schedule_cleanup(manager, interval_seconds)


def start_cache_cleanup(
    manager: Optional[ModelManager] = None,
    interval_seconds: float = CACHE_CLEANUP_INTERVAL_SECONDS,
) -> None:
    """Run ``manager.cleanup_cache()`` every ``interval_seconds`` on a daemon timer.

    Calling it again replaces the running timer.
    """
    stop_cache_cleanup()
    with _TIMER_LOCK:
        _schedule_cleanup(manager or get_default_manager(), interval_seconds)
    log_event(_logger, "cache.cleanup.scheduled", interval_seconds=interval_seconds)


def cache_cleanup_running() -> bool:
    return _CLEANUP_TIMER is not None


def stop_cache_cleanup() -> None:
    global _CLEANUP_TIMER
    with _TIMER_LOCK:
        timer = _CLEANUP_TIMER
        _CLEANUP_TIMER = None
    if timer is not None:
        timer.cancel()


__all__ = [
    "create_default_registry",
    "create_manager",
    "get_default_manager",
    "set_default_manager",
    "resolve_and_get_model",
    "start_cache_cleanup",
    "stop_cache_cleanup",
    "cache_cleanup_running",
]
