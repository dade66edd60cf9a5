"""knowlex_providers.config.defaults
=================================

Small, stable default values used across the package. They can be
overridden through environment variables, the optional config file or
explicit overrides (see :mod:`knowlex_providers.config`).

Only plain constants live here so any module can import them without
creating cycles.
"""

from __future__ import annotations

# ---- OpenAI-style ----
OPENAI_PROVIDER_NAME = "openai"
OPENAI_DISPLAY_NAME = "OpenAI"
OPENAI_DEFAULT_MODEL = "gpt-4o"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

# ---- Claude-style ----
ANTHROPIC_PROVIDER_NAME = "anthropic"
ANTHROPIC_DISPLAY_NAME = "Claude (Anthropic)"
ANTHROPIC_DEFAULT_MODEL = "claude-3-sonnet"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_API_VERSION = "2023-06-01"

# ---- Sampling ----
DEFAULT_TOP_P = 1.0
DEFAULT_FREQUENCY_PENALTY = 0.0
DEFAULT_PRESENCE_PENALTY = 0.0

# ---- Model instance cache ----
CACHE_CLEANUP_INTERVAL_SECONDS = 15 * 60

__all__ = [
    "OPENAI_PROVIDER_NAME",
    "OPENAI_DISPLAY_NAME",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_PROVIDER_NAME",
    "ANTHROPIC_DISPLAY_NAME",
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ANTHROPIC_API_VERSION",
    "DEFAULT_TOP_P",
    "DEFAULT_FREQUENCY_PENALTY",
    "DEFAULT_PRESENCE_PENALTY",
    "CACHE_CLEANUP_INTERVAL_SECONDS",
]
