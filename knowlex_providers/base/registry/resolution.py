"""Provider resolution.

Given a configuration, choose the registered provider that should serve it.
Order of precedence:

1. an explicit ``config.provider`` (aliases such as ``claude`` accepted);
2. an exact match of ``config.model`` in a provider's supported-model list;
3. model-name patterns (``gpt``/``openai`` and ``claude``);
4. a ``base_url`` that is not any registered provider's first-party host is
   treated as an OpenAI-compatible custom endpoint.

Anything else is a :class:`ConfigurationError` naming the model.
"""
from __future__ import annotations

from typing import Dict, Iterable, Optional, Sequence, Set
from urllib.parse import urlparse

from ..dto import ModelConfig
from ..errors import ConfigurationError
from ..interfaces import AIProvider

OPENAI_COMPATIBLE = "openai"

PROVIDER_ALIASES: Dict[str, str] = {"claude": "anthropic"}

NAME_PATTERNS = (
    ("gpt", "openai"),
    ("openai", "openai"),
    ("claude", "anthropic"),
)


def canonical_provider_name(name: str) -> str:
    key = name.strip().lower()
    return PROVIDER_ALIASES.get(key, key)


def _host(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    parsed = urlparse(url if "://" in url else f"https://{url}")
    return (parsed.hostname or "").lower() or None


def first_party_hosts(providers: Iterable[AIProvider]) -> Set[str]:
    """Hosts of the default endpoints declared by ``providers``."""
    hosts: Set[str] = set()
    for provider in providers:
        host = _host(provider.default_config().get("base_url"))
        if host:
            hosts.add(host)
    return hosts


def is_custom_endpoint(base_url: Optional[str], providers: Iterable[AIProvider]) -> bool:
    host = _host(base_url)
    return host is not None and host not in first_party_hosts(providers)


def resolve_provider(providers: Sequence[AIProvider], config: ModelConfig) -> AIProvider:
    """Return the provider for ``config`` or raise :class:`ConfigurationError`."""
    by_name = {p.name: p for p in providers}

    if config.provider:
        name = canonical_provider_name(config.provider)
        if name in by_name:
            return by_name[name]
        raise ConfigurationError(
            f"Provider '{config.provider}' is not registered",
            provider=config.provider,
            model=config.model,
        )

    for provider in providers:
        if any(info.name == config.model for info in provider.supported_models()):
            return provider

    model = config.model.lower()
    for pattern, name in NAME_PATTERNS:
        if pattern in model and name in by_name:
            return by_name[name]

    if OPENAI_COMPATIBLE in by_name and is_custom_endpoint(config.base_url, providers):
        return by_name[OPENAI_COMPATIBLE]

    raise ConfigurationError(f"No provider found for model: {config.model}", model=config.model)


__all__ = [
    "OPENAI_COMPATIBLE",
    "PROVIDER_ALIASES",
    "NAME_PATTERNS",
    "canonical_provider_name",
    "first_party_hosts",
    "is_custom_endpoint",
    "resolve_provider",
]
