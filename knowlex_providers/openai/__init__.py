"""OpenAI-style provider adapter."""

from .client import OpenAIModel, OpenAIProvider

__all__ = ["OpenAIModel", "OpenAIProvider"]
