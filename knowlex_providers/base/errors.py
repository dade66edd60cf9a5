"""Unified provider error taxonomy public surface.

Re-exports the implementations under ``knowlex_providers.base.errors_parts``
so callers have one stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import (
    APIError,
    ConfigurationError,
    ProviderError,
    ValidationError,
)
from .errors_parts.classification import (
    AUTH_MESSAGE,
    RATE_LIMIT_MESSAGE,
    classify_exception,
    classify_status,
    error_from_response,
    extract_error_message,
    network_error,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "ValidationError",
    "APIError",
    "AUTH_MESSAGE",
    "RATE_LIMIT_MESSAGE",
    "classify_exception",
    "classify_status",
    "error_from_response",
    "extract_error_message",
    "network_error",
]
