"""Provider interfaces public surface."""

from .interfaces_parts import REQUIRED_PROVIDER_OPERATIONS, AIModel, AIProvider

__all__ = ["AIModel", "AIProvider", "REQUIRED_PROVIDER_OPERATIONS"]
