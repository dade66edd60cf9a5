"""Retrying HTTP transport used by every adapter.

``send_request`` issues one logical request through the shared retry policy:

- 2xx: the response is returned (still open when ``stream=True``; the caller
  owns closing it). With ``prime``, the open response is first read up to its
  first output inside the same attempt.
- 401: :class:`APIError` with the invalid-credential message, never retried.
- 429 / 503: retried with backoff, then surfaced as :class:`APIError`.
- transport failures (timeouts, resets, DNS): retried the same way, then
  surfaced as :class:`APIError` with ``status_code == 0``.
- any other non-2xx: the provider error message (or the status line) is
  surfaced at once.

The function knows nothing about provider wire formats; adapters pass the
URL, headers and JSON body they built.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import httpx

from ..errors import APIError, ErrorCode, ProviderError, error_from_response, network_error
from ..logging import LogContext, get_logger, normalized_log_event
from ..resilience.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry

_logger = get_logger(__name__)

T = TypeVar("T")


def _attempt_logger(ctx: LogContext):
    def _log(*, attempt: int, max_attempts: int, delay: float | None, error: ProviderError | None) -> None:
        if error is None:
            normalized_log_event(_logger, "http.retry", ctx, phase="recovered", attempt=attempt + 1)
            return
        normalized_log_event(
            _logger,
            "http.retry" if delay is not None else "http.error",
            ctx,
            phase="retrying" if delay is not None else "failed",
            attempt=attempt + 1,
            error_code=error.code.value,
            max_attempts=max_attempts,
            delay=delay,
            status=getattr(error, "status_code", None),
            message=error.message,
        )

    return _log


def send_request(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    provider: str,
    model: Optional[str],
    service_label: str,
    headers: Optional[Mapping[str, str]] = None,
    json_body: Any = None,
    stream: bool = False,
    retry_config: Optional[RetryConfig] = None,
    prime: Optional[Callable[[httpx.Response], T]] = None,
) -> Any:
    """Send a request with retry, returning the successful response.

    With ``prime`` (streaming only), the open response is passed to it inside
    the same attempt and its result is returned instead. A transport failure
    while priming closes the response and counts as a failed attempt, so a
    body that stalls before its first event is retried like a failed request.

    Raises:
        APIError: after exhausting retries or on a non-retryable status.
    """
    config = retry_config or DEFAULT_RETRY_CONFIG
    if config.attempt_logger is None:
        ctx = LogContext(provider=provider, model=model)
        config = dataclasses.replace(config, attempt_logger=_attempt_logger(ctx))

    @retry(config)
    def _attempt() -> Any:
        request = client.build_request(method, url, headers=headers, json=json_body)
        try:
            response = client.send(request, stream=stream)
        except httpx.TransportError as exc:
            raise network_error(exc, provider=provider, model=model) from exc
        if response.is_success:
            if prime is None:
                return response
            return _prime(response, prime, provider=provider, model=model)
        try:
            response.read()
        except httpx.TransportError:
            pass  # status line alone is enough to classify
        finally:
            response.close()
        raise error_from_response(
            response, provider=provider, model=model, service_label=service_label
        )

    return _attempt()


def _prime(
    response: httpx.Response,
    prime: Callable[[httpx.Response], T],
    *,
    provider: str,
    model: Optional[str],
) -> T:
    try:
        return prime(response)
    except httpx.TransportError as exc:
        response.close()
        raise network_error(exc, provider=provider, model=model) from exc
    except Exception:
        response.close()
        raise


def read_json(response: httpx.Response, *, provider: str, model: Optional[str]) -> Dict[str, Any]:
    """Decode a successful JSON response body into a mapping.

    Raises:
        APIError: when the body is not a JSON object.
    """
    try:
        data = response.json()
    except ValueError as exc:
        raise APIError(
            "Provider returned a malformed response body",
            status_code=response.status_code,
            code=ErrorCode.SERVER_ERROR,
            provider=provider,
            model=model,
            raw=exc,
        ) from exc
    if not isinstance(data, dict):
        raise APIError(
            "Provider returned an unexpected response body",
            status_code=response.status_code,
            code=ErrorCode.SERVER_ERROR,
            provider=provider,
            model=model,
        )
    return data


__all__ = ["send_request", "read_json"]
