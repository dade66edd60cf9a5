"""Retry policy shared by every outbound provider call.

A failed attempt is retried only when the raised :class:`ProviderError` is
flagged ``retryable`` and its code is in ``retryable_codes``. The defaults
retry rate limiting (429), service unavailability (503) and network-level
failures three times with delays of 1s, 2s and 4s. Everything else (401,
other non-2xx statuses, validation problems) propagates on the first attempt.
"""
from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol, TypeVar

from ..errors import ErrorCode, ProviderError

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 4  # initial attempt + 3 retries
    delay_base: float = 2.0  # delay before retry n is delay_base ** n
    retryable_codes: tuple[ErrorCode, ...] = (
        ErrorCode.RATE_LIMIT,
        ErrorCode.UNAVAILABLE,
        ErrorCode.NETWORK,
        ErrorCode.TIMEOUT,
    )
    attempt_logger: AttemptLogger | None = None

    def delays(self) -> Iterable[float]:
        for attempt in range(self.max_attempts - 1):
            yield self.delay_base**attempt

    def should_retry(self, error: ProviderError) -> bool:
        return error.retryable and error.code in self.retryable_codes


DEFAULT_RETRY_CONFIG = RetryConfig()


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Return a decorator applying the retry policy.

    - Retries only errors accepted by ``config.should_retry``
    - Exponential backoff using ``delay_base ** attempt``
    - Preserves the wrapped function's signature
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            last_exc: ProviderError | None = None
            for attempt, delay in enumerate(list(config.delays()) + [None]):
                try:
                    result = func(*args, **kwargs)
                except ProviderError as e:
                    last_exc = e
                    retrying = config.should_retry(e) and delay is not None
                    if config.attempt_logger:
                        config.attempt_logger(
                            attempt=attempt,
                            max_attempts=config.max_attempts,
                            delay=delay if retrying else None,
                            error=e,
                        )
                    if retrying:
                        time.sleep(delay)
                        continue
                    raise
                if config.attempt_logger and attempt:
                    config.attempt_logger(
                        attempt=attempt,
                        max_attempts=config.max_attempts,
                        delay=None,
                        error=None,
                    )
                return result
            if last_exc is None:  # pragma: no cover - max_attempts < 1
                raise RuntimeError("retry: reached terminal state without captured exception")
            raise last_exc

        return wrapper

    return decorator


__all__ = ["AttemptLogger", "RetryConfig", "DEFAULT_RETRY_CONFIG", "retry"]
