"""
Error classification helpers.

Maps HTTP statuses and transport exceptions to normalized :class:`ErrorCode`
values and builds the user-facing messages attached to :class:`APIError`.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from .error_code import ErrorCode
from .provider_error import APIError, ProviderError

_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.SERVER_ERROR,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

AUTH_MESSAGE = "Invalid API key or unauthorized access"
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later"


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Checked in order: ``exc.status_code``, ``exc.status``,
    ``exc.response.status_code``.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


def classify_status(status: int) -> ErrorCode:
    """Return the normalized code for an HTTP status."""
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if 500 <= status < 600:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. httpx timeouts, then other httpx transport failures.
        3. HTTP status mapping.
        4. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.NETWORK
    status = _extract_status(exc)
    if status is not None:
        return classify_status(status)
    return ErrorCode.UNKNOWN


def extract_error_message(body: Any) -> Optional[str]:
    """Pull ``error.message`` (or a bare ``message``) out of a decoded error body."""
    if not isinstance(body, dict):
        return None
    err = body.get("error")
    if isinstance(err, dict):
        msg = err.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg
    if isinstance(err, str) and err.strip():
        return err
    msg = body.get("message")
    if isinstance(msg, str) and msg.strip():
        return msg
    return None


def error_from_response(
    response: httpx.Response,
    *,
    provider: str,
    model: Optional[str],
    service_label: str,
) -> APIError:
    """Build an :class:`APIError` for a non-2xx response.

    The response body must already be read.
    """
    status = response.status_code
    code = classify_status(status)
    if status == 401:
        message = AUTH_MESSAGE
    elif status == 429:
        message = RATE_LIMIT_MESSAGE
    elif status == 503:
        message = f"{service_label} service is temporarily unavailable"
    else:
        try:
            body = response.json()
        except (ValueError, httpx.ResponseNotRead):
            body = None
        message = extract_error_message(body) or f"API error: {status} {response.reason_phrase}".rstrip()
    return APIError(
        message,
        status_code=status,
        code=code,
        provider=provider,
        model=model,
        retryable=code in (ErrorCode.RATE_LIMIT, ErrorCode.UNAVAILABLE),
    )


def network_error(exc: BaseException, *, provider: str, model: Optional[str]) -> APIError:
    """Build the status-0 :class:`APIError` used for transport failures."""
    detail = str(exc) or type(exc).__name__
    return APIError(
        f"Network error: {detail}. Check your connectivity",
        status_code=0,
        code=classify_exception(exc),
        provider=provider,
        model=model,
        retryable=True,
        raw=exc,
    )


__all__ = [
    "AUTH_MESSAGE",
    "RATE_LIMIT_MESSAGE",
    "classify_status",
    "classify_exception",
    "extract_error_message",
    "error_from_response",
    "network_error",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
