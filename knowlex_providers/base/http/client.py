"""Shared HTTP client pool for providers.

Purpose:
    Keep one reusable ``httpx.Client`` per (base URL, purpose) so adapters
    share connection pools. Timeouts come from :func:`get_timeout_config`.

Lifecycle & cleanup:
    All pooled clients are closed at interpreter exit via ``atexit``; tests
    and applications may also call :func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..logging import get_logger
from ..timeouts import get_timeout_config

_logger = get_logger(__name__)

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for ``base_url`` and ``purpose``.

    Parameters:
        base_url: API base URL set on the client so callers can issue
            relative requests. ``None`` groups clients under a shared key.
        purpose: Short discriminator for separate pools (e.g. ``"openai"``).

    Thread-safety:
        Safe for concurrent use; creation is guarded by a re-entrant lock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = get_timeout_config().to_httpx()
        if base_url:
            client = httpx.Client(base_url=base_url, timeout=timeout)
        else:
            client = httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and forget all pooled clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            try:
                c.close()
            except (httpx.HTTPError, RuntimeError, OSError) as exc:  # pragma: no cover - shutdown path
                _logger.debug("closing pooled client failed: %s", exc)
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
