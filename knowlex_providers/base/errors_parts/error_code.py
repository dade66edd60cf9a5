"""
Normalized error codes (taxonomy).

Defines the ``ErrorCode`` enumeration shared by adapters, the retry policy and
structured logging. Values are lowercase snake_case and are part of the stable
logging contract.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    NETWORK = "network"
    UNAVAILABLE = "unavailable"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
