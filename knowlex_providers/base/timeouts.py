"""Unified timeout configuration for provider HTTP calls.

Timeouts are enforced per HTTP call by ``httpx``, never per whole stream. The
read timeout doubles as the streaming idle timeout: a stream that delivers no
bytes for that long fails the underlying read.

Environment overrides (seconds, positive floats, all optional):
    KNOWLEX_TIMEOUT_CONNECT_SECONDS
    KNOWLEX_TIMEOUT_READ_SECONDS
    KNOWLEX_TIMEOUT_WRITE_SECONDS
    KNOWLEX_TIMEOUT_POOL_SECONDS

The parsed configuration is cached and refreshed only when one of these
variables changes, so tests can adjust them with ``monkeypatch.setenv``.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

_ENV_NAMES = (
    "KNOWLEX_TIMEOUT_CONNECT_SECONDS",
    "KNOWLEX_TIMEOUT_READ_SECONDS",
    "KNOWLEX_TIMEOUT_WRITE_SECONDS",
    "KNOWLEX_TIMEOUT_POOL_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the TCP/TLS connection.
        read_timeout_seconds: Waiting for the next bytes of a response; the
            idle timeout for streams.
        write_timeout_seconds: Sending the request body.
        pool_timeout_seconds: Waiting for a free pooled connection.
    """

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 60.0
    write_timeout_seconds: float = 30.0
    pool_timeout_seconds: float = 10.0

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.write_timeout_seconds,
            pool=self.pool_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from ``name``; fall back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and guard == _ENV_GUARD:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds),
        read_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.read_timeout_seconds),
        write_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.write_timeout_seconds),
        pool_timeout_seconds=_parse_env_float(_ENV_NAMES[3], defaults.pool_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
