"""Message validation and convenience constructors.

``validate_messages`` is the gate both ``chat`` and ``stream`` pass through
before any network activity.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from ..errors import ValidationError
from ..models import VALID_ROLES, ContentPart, Message, ModelCapabilities


def validate_messages(messages: Sequence[Message], *, provider: str = "-", model: str | None = None) -> None:
    """Raise :class:`ValidationError` unless ``messages`` is a usable list.

    Rules: the list is non-empty; every role is system/user/assistant; string
    content is non-blank; part lists are non-empty, text parts are non-blank
    and image parts carry a URL.
    """

    def fail(message: str) -> None:
        raise ValidationError(message, provider=provider, model=model)

    if not messages:
        fail("Messages array cannot be empty")
    for index, message in enumerate(messages):
        if not isinstance(message, Message):
            fail(f"Message {index} is not a Message instance")
        if message.role not in VALID_ROLES:
            fail(f"Message {index} has invalid role: {message.role!r}")
        content = message.content
        if isinstance(content, str):
            if not content.strip():
                fail(f"Message {index} has empty content")
            continue
        if not isinstance(content, list) or not content:
            fail(f"Message {index} has empty content")
        for part in content:
            if not isinstance(part, ContentPart):
                fail(f"Message {index} contains an unknown content part")
            if part.type == "text":
                if not part.text or not part.text.strip():
                    fail(f"Message {index} contains an empty text part")
            elif part.type == "image":
                if not part.image_url:
                    fail(f"Message {index} contains an image part without a URL")
            else:
                fail(f"Message {index} has unsupported content type: {part.type!r}")


def system_message(text: str) -> Message:
    return Message(role="system", content=text)


def user_message(text: str, images: Iterable[str] = ()) -> Message:
    """User message; with ``images`` the content becomes a part list."""
    urls = list(images)
    if not urls:
        return Message(role="user", content=text)
    parts: List[ContentPart] = [ContentPart.text_part(text)] if text else []
    parts.extend(ContentPart.image_part(url) for url in urls)
    return Message(role="user", content=parts)


def assistant_message(text: str) -> Message:
    return Message(role="assistant", content=text)


def extract_text_content(message: Message) -> str:
    """Text of ``message`` with image parts omitted."""
    if isinstance(message.content, str):
        return message.content
    return "\n".join(p.text or "" for p in message.content if p.type == "text")


def estimate_token_count(text: str) -> int:
    """Rough token estimate (four characters per token)."""
    return (len(text) + 3) // 4


def exceeds_context_length(messages: Sequence[Message], capabilities: ModelCapabilities) -> bool:
    total = sum(estimate_token_count(extract_text_content(m)) for m in messages)
    return total > capabilities.max_context_length


__all__ = [
    "validate_messages",
    "system_message",
    "user_message",
    "assistant_message",
    "extract_text_content",
    "estimate_token_count",
    "exceeds_context_length",
]
