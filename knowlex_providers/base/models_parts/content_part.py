"""
Multimodal content part model.

A message's content is either a plain string or an ordered list of
``ContentPart`` items. Two part types exist: ``text`` and ``image``. Image
parts carry a URL which is either an inline ``data:`` URL (base64 payload plus
media type) or a remote ``http(s)`` reference.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Literal, Optional

ContentPartType = Literal["text", "image"]


@dataclass(frozen=True)
class ContentPart:
    """A single text or image segment of a message.

    Attributes:
        type: ``"text"`` or ``"image"``.
        text: Text payload for ``text`` parts.
        image_url: Data URL or remote URL for ``image`` parts.
        detail: Optional quality hint forwarded to providers that accept one.
    """

    type: ContentPartType
    text: Optional[str] = None
    image_url: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def text_part(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    @classmethod
    def image_part(cls, url: str, detail: Optional[str] = None) -> "ContentPart":
        return cls(type="image", image_url=url, detail=detail)

    @classmethod
    def image_bytes(cls, data: bytes, media_type: str) -> "ContentPart":
        """Build an inline image part from raw bytes."""
        encoded = base64.b64encode(data).decode("ascii")
        return cls(type="image", image_url=f"data:{media_type};base64,{encoded}")

    @property
    def is_inline_image(self) -> bool:
        return self.type == "image" and bool(self.image_url) and self.image_url.startswith("data:")


__all__ = ["ContentPart", "ContentPartType"]
