"""
Catalog entry describing one supported model.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .capabilities import ModelCapabilities


@dataclass(frozen=True)
class ModelInfo:
    """Metadata for a model listed by a provider.

    Attributes:
        name: Wire identifier sent to the provider (e.g. ``gpt-4o``).
        display_name: Human-readable label.
        capabilities: Declared capabilities.
        provider: Owning provider name; filled in by registry listings.
    """

    name: str
    display_name: str
    capabilities: ModelCapabilities
    provider: Optional[str] = None


__all__ = ["ModelInfo"]
