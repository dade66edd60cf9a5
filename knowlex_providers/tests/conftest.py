"""Shared fixtures for the knowlex_providers test suite.

HTTP is never real: adapters receive an ``httpx.Client`` backed by
``httpx.MockTransport``. Backoff sleeps are patched out through
``time.sleep`` and recorded so tests can assert the delay sequence.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, Iterator, List

import httpx
import pytest

from knowlex_providers import bootstrap
from knowlex_providers.base.logging import BASE_LOGGER_NAME
from knowlex_providers.config import reset_config_cache

from .support import FakeClock, Handler


class _ListHandler(logging.Handler):
    """Collect decoded JSON events emitted on the provider logger."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            return
        if isinstance(payload, dict):
            payload["_level"] = record.levelno
            self.events.append(payload)

    def named(self, event: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("event") == event]


@pytest.fixture()
def make_client() -> Iterator[Callable[[Handler], httpx.Client]]:
    clients: List[httpx.Client] = []

    def _make(handler: Handler) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


@pytest.fixture()
def sleeps(monkeypatch: pytest.MonkeyPatch) -> List[float]:
    """Replace ``time.sleep`` with a recorder of requested delays."""
    recorded: List[float] = []
    monkeypatch.setattr(time, "sleep", lambda seconds: recorded.append(seconds))
    return recorded


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def log_events() -> Iterator[_ListHandler]:
    logger = logging.getLogger(BASE_LOGGER_NAME)
    handler = _ListHandler()
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield handler
    logger.removeHandler(handler)
    logger.setLevel(previous)


@pytest.fixture(autouse=True)
def _isolated_globals(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Keep process-wide state (shared manager, config cache, dotenv) per test."""
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.delenv("KNOWLEX_PROVIDERS_CONFIG_FILE", raising=False)
    reset_config_cache()
    bootstrap.set_default_manager(None)
    yield
    bootstrap.stop_cache_cleanup()
    bootstrap.set_default_manager(None)
    reset_config_cache()
