"""Token accounting helpers."""

from .extraction import extract_anthropic_token_usage, extract_openai_token_usage, merge_token_usage

__all__ = ["extract_openai_token_usage", "extract_anthropic_token_usage", "merge_token_usage"]
