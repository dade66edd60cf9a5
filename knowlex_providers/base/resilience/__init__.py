"""Resilience policies (retry/backoff) for provider calls."""

from .retry import DEFAULT_RETRY_CONFIG, AttemptLogger, RetryConfig, retry

__all__ = ["AttemptLogger", "RetryConfig", "DEFAULT_RETRY_CONFIG", "retry"]
