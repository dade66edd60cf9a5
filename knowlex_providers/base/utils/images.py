"""Image URL helpers shared by the adapters."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_DATA_URL_RE = re.compile(r"^data:(?P<media>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^,;]+)*);base64,(?P<data>.*)$", re.S)


@dataclass(frozen=True)
class InlineImage:
    media_type: str
    data: str


def parse_data_url(url: str) -> Optional[InlineImage]:
    """Split a base64 ``data:`` URL into media type and payload.

    Returns ``None`` for remote URLs and non-base64 data URLs.
    """
    match = _DATA_URL_RE.match(url or "")
    if match is None:
        return None
    return InlineImage(media_type=(match.group("media") or "image/png").lower(), data=match.group("data"))


def is_data_url(url: str) -> bool:
    return bool(url) and url.startswith("data:")


__all__ = ["InlineImage", "parse_data_url", "is_data_url"]
