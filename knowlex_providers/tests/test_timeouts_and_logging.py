from __future__ import annotations

import json
import logging

from knowlex_providers.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)
from knowlex_providers.base.log_support import JsonFormatter, LogContext
from knowlex_providers.base.timeouts import TimeoutConfig, get_timeout_config


def test_timeout_defaults_and_env_override(monkeypatch):
    for name in ("CONNECT", "READ", "WRITE", "POOL"):
        monkeypatch.delenv(f"KNOWLEX_TIMEOUT_{name}_SECONDS", raising=False)
    assert get_timeout_config() == TimeoutConfig()  # nosec B101

    monkeypatch.setenv("KNOWLEX_TIMEOUT_READ_SECONDS", "5")
    monkeypatch.setenv("KNOWLEX_TIMEOUT_CONNECT_SECONDS", "-1")
    cfg = get_timeout_config()
    assert cfg.read_timeout_seconds == 5.0  # nosec B101
    assert cfg.connect_timeout_seconds == 10.0  # nosec B101
    assert cfg.to_httpx().read == 5.0  # nosec B101


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_get_logger_nests_foreign_names():
    assert get_logger("elsewhere").name == "knowlex_providers.elsewhere"  # nosec B101
    assert get_logger("knowlex_providers.cache").name == "knowlex_providers.cache"  # nosec B101


def test_log_event_merges_context_and_drops_none(log_events):
    logger = get_logger("tests.events")
    log_event(logger, "cache.hit", LogContext(provider="openai", model="gpt-4o"), key="k", extra=None)
    event = log_events.named("cache.hit")[0]
    assert event["provider"] == "openai" and event["key"] == "k"  # nosec B101
    assert "extra" not in event  # nosec B101


def test_normalized_log_event_emits_required_keys(log_events):
    logger = get_logger("tests.normalized")
    normalized_log_event(logger, "stream.end", LogContext(provider="p"), phase="finished", tokens={"total": 3}, phase_alias="x")
    event = log_events.named("stream.end")[0]
    missing = [k for k in REQUIRED_NORMALIZED_KEYS if k != "error_code" and k not in event]
    assert missing == []  # nosec B101
    assert event["tokens"] == {"total": 3}  # nosec B101
    assert "error_code" not in event  # nosec B101


def test_json_formatter_outputs_object():
    record = logging.LogRecord("knowlex_providers.x", logging.INFO, __file__, 1, "hello", None, None)
    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "hello"  # nosec B101
    assert payload["level"] == "INFO"  # nosec B101


def test_json_formatter_hoists_structured_messages():
    record = logging.LogRecord("knowlex_providers.x", logging.INFO, __file__, 1, '{"event": "cache.hit", "key": "k"}', None, None)
    payload = json.loads(JsonFormatter().format(record))
    assert payload["event"] == "cache.hit" and "msg" not in payload  # nosec B101


def test_configure_logger_file_handler(tmp_path):
    target = tmp_path / "logs" / "providers.log"
    logger = configure_logger(file_path=str(target))
    try:
        log_event(logger, "registry.register", provider="openai")
        for handler in logger.handlers:
            handler.flush()
        assert "registry.register" in target.read_text(encoding="utf-8")  # nosec B101
    finally:
        configure_logger(file_path=None)
