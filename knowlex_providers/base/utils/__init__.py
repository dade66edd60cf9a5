"""Provider-agnostic helpers."""

from .images import InlineImage, is_data_url, parse_data_url
from .messages import (
    assistant_message,
    estimate_token_count,
    exceeds_context_length,
    extract_text_content,
    system_message,
    user_message,
    validate_messages,
)

__all__ = [
    "InlineImage",
    "is_data_url",
    "parse_data_url",
    "assistant_message",
    "estimate_token_count",
    "exceeds_context_length",
    "extract_text_content",
    "system_message",
    "user_message",
    "validate_messages",
]
