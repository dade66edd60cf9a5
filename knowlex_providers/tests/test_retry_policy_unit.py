from __future__ import annotations

import time

import pytest

from knowlex_providers.base.errors import ErrorCode, ProviderError
from knowlex_providers.base.resilience.retry import RetryConfig, retry


class _Flaky:
    def __init__(self, fail_times: int, code: ErrorCode, retryable: bool = True):
        self.calls = 0
        self.fail_times = fail_times
        self.code = code
        self.retryable = retryable

    def __call__(self):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise ProviderError(code=self.code, message="boom", provider="x", retryable=self.retryable)
        return "ok"


def test_retry_succeeds_after_transient(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_: None)

    attempt_log = []

    def attempt_logger(**kw):
        attempt_log.append(kw)

    cfg = RetryConfig(max_attempts=3, delay_base=1.0, attempt_logger=attempt_logger)
    flaky = _Flaky(fail_times=2, code=ErrorCode.RATE_LIMIT)

    @retry(cfg)
    def run():
        return flaky()

    assert run() == "ok"  # nosec B101 - asserts are appropriate in unit tests
    assert flaky.calls == 3  # nosec B101
    assert attempt_log[-1]["error"] is None  # nosec B101


def test_retry_stops_on_non_retryable_code():
    flaky = _Flaky(fail_times=99, code=ErrorCode.VALIDATION)

    @retry(RetryConfig())
    def run():
        return flaky()

    with pytest.raises(ProviderError) as ei:
        run()
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101
    assert flaky.calls == 1  # nosec B101


def test_retry_respects_retryable_flag():
    flaky = _Flaky(fail_times=99, code=ErrorCode.RATE_LIMIT, retryable=False)

    @retry(RetryConfig())
    def run():
        return flaky()

    with pytest.raises(ProviderError):
        run()
    assert flaky.calls == 1  # nosec B101


def test_default_delays_are_exponential(monkeypatch):
    delays = []
    monkeypatch.setattr(time, "sleep", delays.append)
    flaky = _Flaky(fail_times=99, code=ErrorCode.UNAVAILABLE)

    @retry(RetryConfig())
    def run():
        return flaky()

    with pytest.raises(ProviderError):
        run()
    assert flaky.calls == 4  # nosec B101
    assert delays == [1.0, 2.0, 4.0]  # nosec B101


def test_retry_config_delays_sequence():
    assert list(RetryConfig(max_attempts=1).delays()) == []  # nosec B101
    assert list(RetryConfig(max_attempts=3, delay_base=3.0).delays()) == [1.0, 3.0]  # nosec B101
