"""
Structured error types raised by the provider layer.

``ProviderError`` carries a normalized :class:`ErrorCode` so callers can branch
on the category without parsing messages. The three concrete kinds surfaced to
application code are:

- ``ConfigurationError``: bad registration, unresolved provider, failed model
  construction.
- ``ValidationError``: malformed message lists or invalid configuration fields.
- ``APIError``: any failed HTTP exchange; ``status_code`` is ``0`` when no
  response was received at all (network failure).

Each ``message`` is meant to be shown to end users as-is.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable message suitable for display.
        provider: Provider key where the error originated (e.g. ``"openai"``).
        model: Optional model name associated with the failure.
        retryable: Hint for the retry policy.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str = "-"
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


class ConfigurationError(ProviderError):
    """Registration, resolution or model construction failure."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "-",
        model: Optional[str] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIGURATION,
            message=message,
            provider=provider,
            model=model,
            retryable=False,
            raw=raw,
        )


class ValidationError(ProviderError):
    """Invalid caller input (messages or configuration fields)."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "-",
        model: Optional[str] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION,
            message=message,
            provider=provider,
            model=model,
            retryable=False,
            raw=raw,
        )


class APIError(ProviderError):
    """Failed remote call.

    ``status_code`` mirrors the HTTP status; ``0`` means the request never got a
    response (DNS failure, connection reset, timeout).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        code: ErrorCode = ErrorCode.UNKNOWN,
        provider: str = "-",
        model: Optional[str] = None,
        retryable: bool = False,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            provider=provider,
            model=model,
            retryable=retryable,
            raw=raw,
        )
        self.status_code = status_code

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{super().__str__()} (status={self.status_code})"


__all__ = ["ProviderError", "ConfigurationError", "ValidationError", "APIError"]
