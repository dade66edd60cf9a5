"""
Canonical chat message.

``content`` may be a plain string or a list of :class:`ContentPart`. Helpers
are provided for flattening content to text for logging and token estimates.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Union

from .content_part import ContentPart

Role = Literal["system", "user", "assistant"]

VALID_ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class Message:
    """A chat message in provider-agnostic form.

    Attributes:
        role: ``"system"``, ``"user"`` or ``"assistant"``.
        content: Plain text, or an ordered list of content parts.
    """

    role: Role
    content: Union[str, List[ContentPart]]

    def is_structured(self) -> bool:
        """Return True if the message content is a list of parts."""
        return isinstance(self.content, list)

    def text_or_joined(self) -> str:
        """Return the text of the message; parts are joined with newlines.

        Non-text parts are represented by a bracketed type token.
        """
        if isinstance(self.content, str):
            return self.content
        parts: List[str] = []
        for p in self.content:
            if p.type == "text":
                parts.append(p.text or "")
            else:
                parts.append(f"[{p.type}]")
        return "\n".join(parts)


__all__ = ["Message", "Role", "VALID_ROLES"]
