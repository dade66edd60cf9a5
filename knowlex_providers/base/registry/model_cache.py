"""Model instance cache.

Bounded, time-limited memo of constructed model instances.

Key
    ``provider:model:credential:base_url:temperature:max_tokens`` where
    ``credential`` is a short SHA-256 fingerprint of the API key, so keys can
    be logged without exposing the secret. Configurations that differ only in
    other fields share an entry.

Expiry
    An entry older than ``ttl_seconds`` (measured from creation) is a miss on
    access and is removed by :meth:`ModelInstanceCache.cleanup`.

Eviction
    Inserting into a full cache first evicts the entry with the oldest
    ``last_used`` time.

All map operations hold an internal lock; construction of new instances
happens outside it (see :class:`~knowlex_providers.base.registry.manager.ModelManager`).
"""
from __future__ import annotations

import hashlib
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..dto import ModelConfig
from ..interfaces import AIModel
from ..logging import get_logger, log_event

_logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60
DEFAULT_MAX_ENTRIES = 10
CREDENTIAL_FINGERPRINT_LENGTH = 12


def credential_fingerprint(api_key: str) -> str:
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()[:CREDENTIAL_FINGERPRINT_LENGTH]


def cache_key(provider_name: str, config: ModelConfig) -> str:
    """Cache key for ``config`` served by ``provider_name``."""
    return ":".join(
        (
            provider_name,
            config.model,
            credential_fingerprint(config.api_key),
            config.base_url or "default",
            str(config.effective_temperature),
            str(config.effective_max_tokens),
        )
    )


@dataclass
class CacheEntry:
    model: AIModel
    config: ModelConfig
    created_at: float
    last_used: float


@dataclass(frozen=True)
class CacheEntryStats:
    key: str
    age_seconds: float
    idle_seconds: float


@dataclass(frozen=True)
class CacheStats:
    size: int
    max_entries: int
    ttl_seconds: float
    entries: List[CacheEntryStats]


class ModelInstanceCache:
    """Thread-safe LRU + TTL cache of model instances."""

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._ttl = ttl_seconds
        self._max = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def max_entries(self) -> int:
        return self._max

    def _expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at > self._ttl

    def get(self, key: str) -> Optional[AIModel]:
        """Return the cached instance and refresh its ``last_used``; ``None`` on miss."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._expired(entry, now):
                entry.last_used = now
                return entry.model
            del self._entries[key]
        log_event(_logger, "cache.expire", key=key)
        return None

    def put(self, key: str, model: AIModel, config: ModelConfig) -> AIModel:
        """Insert ``model`` under ``key`` and return the instance now cached.

        If a live entry appeared for ``key`` meanwhile (a concurrent caller
        won the race), that entry is kept and returned instead.
        """
        now = self._clock()
        evicted: List[str] = []
        with self._lock:
            current = self._entries.get(key)
            if current is not None and not self._expired(current, now):
                current.last_used = now
                return current.model
            self._entries.pop(key, None)
            while len(self._entries) >= self._max:
                oldest = min(self._entries, key=lambda k: self._entries[k].last_used)
                del self._entries[oldest]
                evicted.append(oldest)
            self._entries[key] = CacheEntry(model=model, config=config, created_at=now, last_used=now)
        for old in evicted:
            log_event(_logger, "cache.evict", key=old, reason="capacity")
        return model

    def invalidate_provider(self, provider_name: str) -> int:
        """Drop every entry belonging to ``provider_name``; returns the count."""
        prefix = provider_name + ":"
        with self._lock:
            doomed = [k for k in self._entries if k.startswith(prefix)]
            for k in doomed:
                del self._entries[k]
        log_event(_logger, "cache.invalidate", provider=provider_name, removed=len(doomed))
        return len(doomed)

    def cleanup(self) -> int:
        """Remove entries older than the TTL regardless of use; returns the count."""
        now = self._clock()
        with self._lock:
            doomed = [k for k, e in self._entries.items() if self._expired(e, now)]
            for k in doomed:
                del self._entries[k]
        log_event(_logger, "cache.cleanup", removed=len(doomed), remaining=len(self))
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        now = self._clock()
        with self._lock:
            entries = [
                CacheEntryStats(key=k, age_seconds=now - e.created_at, idle_seconds=now - e.last_used)
                for k, e in self._entries.items()
            ]
        return CacheStats(size=len(entries), max_entries=self._max, ttl_seconds=self._ttl, entries=entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = [
    "DEFAULT_TTL_SECONDS",
    "DEFAULT_MAX_ENTRIES",
    "CacheEntry",
    "CacheEntryStats",
    "CacheStats",
    "ModelInstanceCache",
    "cache_key",
    "credential_fingerprint",
]
