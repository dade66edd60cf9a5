"""Interfaces (Protocols) split into single-class modules."""

from .ai_model import AIModel
from .ai_provider import REQUIRED_PROVIDER_OPERATIONS, AIProvider

__all__ = ["AIModel", "AIProvider", "REQUIRED_PROVIDER_OPERATIONS"]
