"""Errors parts package.

Prefer importing from ``knowlex_providers.base.errors`` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import APIError, ConfigurationError, ProviderError, ValidationError
from .classification import classify_exception, classify_status

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "ValidationError",
    "APIError",
    "classify_exception",
    "classify_status",
]
