from __future__ import annotations

from knowlex_providers.base.models import TokenUsage
from knowlex_providers.base.tokens import (
    extract_anthropic_token_usage,
    extract_openai_token_usage,
    merge_token_usage,
)


def test_openai_usage_block():
    payload = {"usage": {"prompt_tokens": 11, "completion_tokens": 4, "total_tokens": 15}}
    assert extract_openai_token_usage(payload) == TokenUsage(11, 4, 15)  # nosec B101


def test_openai_total_follows_components():
    payload = {"usage": {"prompt_tokens": 11, "completion_tokens": 4, "total_tokens": 99}}
    assert extract_openai_token_usage(payload).total_tokens == 15  # nosec B101


def test_anthropic_usage_block_derives_total():
    assert extract_anthropic_token_usage({"usage": {"input_tokens": 8, "output_tokens": 2}}) == TokenUsage(8, 2, 10)  # nosec B101


def test_missing_or_garbage_values():
    assert extract_openai_token_usage({}) is None  # nosec B101
    assert extract_openai_token_usage({"usage": None}) is None  # nosec B101
    assert extract_anthropic_token_usage("nope") is None  # nosec B101
    usage = extract_anthropic_token_usage({"usage": {"input_tokens": -3, "output_tokens": "7"}})
    assert usage == TokenUsage(None, 7, None)  # nosec B101


def test_merge_keeps_known_components():
    start = TokenUsage.from_counts(20, 1)
    merged = merge_token_usage(start, TokenUsage(None, 15, None))
    assert merged == TokenUsage(20, 15, 35)  # nosec B101
    assert merge_token_usage(None, start) is start  # nosec B101
    assert merge_token_usage(start, None) is start  # nosec B101
