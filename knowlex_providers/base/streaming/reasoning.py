"""Inline reasoning extraction.

Some models have no separate reasoning channel and wrap their chain of thought
in ``<thinking>...</thinking>`` (or ``<think>...</think>``) inside the answer
text. These helpers move that content out of the visible answer.

Known limitation: detection is purely lexical, so an answer that legitimately
contains the literal tags is split as well. Adapters only apply it to models
declared as reasoning-capable.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

_TAG_PAIRS = (("<thinking>", "</thinking>"), ("<think>", "</think>"))
_INLINE_RE = re.compile(r"<(thinking|think)>([\s\S]*?)</\1>")


def split_inline_reasoning(text: str) -> Tuple[str, Optional[str]]:
    """Split a complete answer into ``(visible_text, reasoning)``.

    ``reasoning`` is ``None`` when no tagged block is present. Multiple blocks
    are joined with a blank line.
    """
    blocks = [m.group(2).strip() for m in _INLINE_RE.finditer(text)]
    if not blocks:
        return text, None
    visible = _INLINE_RE.sub("", text).strip()
    return visible, "\n\n".join(b for b in blocks if b) or None


def _partial_suffix(buffer: str, tags: Tuple[str, ...]) -> int:
    """Length of the longest suffix of ``buffer`` that is a proper prefix of a tag."""
    best = 0
    for tag in tags:
        for size in range(min(len(tag) - 1, len(buffer)), best, -1):
            if buffer.endswith(tag[:size]):
                best = size
                break
    return best


class InlineReasoningSplitter:
    """Streaming counterpart of :func:`split_inline_reasoning`.

    Text is fed delta by delta; ``feed`` returns ``(kind, text)`` segments with
    ``kind`` in ``{"text", "reasoning"}``. Characters that could be the start
    of a tag are held back until the next delta resolves them.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._close_tag: Optional[str] = None

    @property
    def inside_reasoning(self) -> bool:
        return self._close_tag is not None

    def feed(self, delta: str) -> List[Tuple[str, str]]:
        self._buffer += delta
        out: List[Tuple[str, str]] = []
        while self._buffer:
            if self._close_tag is None:
                hit = self._find_open()
                if hit is None:
                    keep = _partial_suffix(self._buffer, tuple(o for o, _ in _TAG_PAIRS))
                    self._emit(out, "text", self._buffer[: len(self._buffer) - keep])
                    self._buffer = self._buffer[len(self._buffer) - keep:]
                    break
                index, open_tag, close_tag = hit
                self._emit(out, "text", self._buffer[:index])
                self._buffer = self._buffer[index + len(open_tag):]
                self._close_tag = close_tag
            else:
                index = self._buffer.find(self._close_tag)
                if index < 0:
                    keep = _partial_suffix(self._buffer, (self._close_tag,))
                    self._emit(out, "reasoning", self._buffer[: len(self._buffer) - keep])
                    self._buffer = self._buffer[len(self._buffer) - keep:]
                    break
                self._emit(out, "reasoning", self._buffer[:index])
                self._buffer = self._buffer[index + len(self._close_tag):]
                self._close_tag = None
        return out

    def flush(self) -> List[Tuple[str, str]]:
        """Release anything still held back (an unterminated block stays reasoning)."""
        out: List[Tuple[str, str]] = []
        self._emit(out, "reasoning" if self._close_tag else "text", self._buffer)
        self._buffer = ""
        self._close_tag = None
        return out

    def _find_open(self) -> Optional[Tuple[int, str, str]]:
        best: Optional[Tuple[int, str, str]] = None
        for open_tag, close_tag in _TAG_PAIRS:
            index = self._buffer.find(open_tag)
            if index >= 0 and (best is None or index < best[0]):
                best = (index, open_tag, close_tag)
        return best

    @staticmethod
    def _emit(out: List[Tuple[str, str]], kind: str, text: str) -> None:
        if not text:
            return
        if out and out[-1][0] == kind:
            out[-1] = (kind, out[-1][1] + text)
        else:
            out.append((kind, text))


__all__ = ["split_inline_reasoning", "InlineReasoningSplitter"]
