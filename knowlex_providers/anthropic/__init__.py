"""Claude-style provider adapter."""

from .client import ClaudeModel, ClaudeProvider

__all__ = ["ClaudeModel", "ClaudeProvider"]
