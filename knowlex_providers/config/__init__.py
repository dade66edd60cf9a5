"""Unified configuration layer.

Merge order (later wins)
------------------------
1. Built-in defaults (:mod:`knowlex_providers.config.defaults`)
2. Optional JSON file named by ``KNOWLEX_PROVIDERS_CONFIG_FILE``
3. Environment variables ``<PROVIDER>_API_KEY``, ``<PROVIDER>_MODEL``,
   ``<PROVIDER>_BASE_URL`` (e.g. ``OPENAI_API_KEY``)
4. In-code overrides passed to the helper

A ``.env`` file (path from ``DOTENV_FILE``, default ``.env``) is read once
before the environment is consulted; it never overrides variables that are
already set.

Config file example::

    {
      "openai": {"model": "gpt-4o-mini", "base_url": "http://localhost:8080/v1"},
      "anthropic": {"model": "claude-3-haiku"}
    }

Public API
----------
* ``get_provider_config(provider, overrides=None) -> dict``
* ``config_from_env(provider, **overrides) -> ModelConfig``
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from ..base.dto import ModelConfig, load_config
from ..base.errors import ConfigurationError
from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MODEL,
    ANTHROPIC_PROVIDER_NAME,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENAI_PROVIDER_NAME,
)

CONFIG_FILE_ENV = "KNOWLEX_PROVIDERS_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    OPENAI_PROVIDER_NAME: {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    ANTHROPIC_PROVIDER_NAME: {"model": ANTHROPIC_DEFAULT_MODEL, "base_url": ANTHROPIC_DEFAULT_BASE_URL},
}

ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Read ``KEY=VALUE`` lines from the dotenv file into the environment once."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        return
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            k, v = line.split("=", 1)
            k = k.strip()
            if k and k not in os.environ:
                os.environ[k] = v.strip().strip('"').strip("'")


def _load_external_config() -> Dict[str, Any]:
    """Parse the JSON config file (cached per path); a missing file yields ``{}``."""
    global _FILE_CACHE, _FILE_CACHE_PATH
    path = os.getenv(CONFIG_FILE_ENV)
    if _FILE_CACHE is not None and path == _FILE_CACHE_PATH:
        return _FILE_CACHE
    _FILE_CACHE_PATH = path
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {exc}", raw=exc) from exc
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val:
            out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged raw configuration mapping for ``provider``."""
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg
    cfg |= _env_overrides(name)
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def config_from_env(provider: str, **overrides: Any) -> ModelConfig:
    """Build a validated :class:`ModelConfig` for ``provider``.

    Raises:
        ValidationError: when the merged configuration is incomplete (e.g. no
            API key anywhere) or out of range.
    """
    merged = get_provider_config(provider, overrides)
    merged.setdefault("provider", provider.lower().strip())
    return load_config(merged)


def reset_config_cache() -> None:
    """Forget the cached config file and dotenv state."""
    global _FILE_CACHE, _FILE_CACHE_PATH, _DOTENV_LOADED
    _FILE_CACHE = None
    _FILE_CACHE_PATH = None
    _DOTENV_LOADED = False


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "get_provider_config",
    "config_from_env",
    "reset_config_cache",
]
