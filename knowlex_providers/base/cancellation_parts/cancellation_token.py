"""Cooperative cancellation token.

Streams poll the token once per received event; cancelling never interrupts a
blocked read, it ends consumption at the next event boundary. Cancellation is a
normal way for a stream to end, so observing it does not raise.
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, List

from ..logging import get_logger
from .state import State

_logger = get_logger(__name__)

CancelCallback = Callable[[str | None], None]


class CancellationToken:
    """Thread-safe cancellation flag with cascading children and callbacks."""

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._state = State()
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        self._callbacks: List[CancelCallback] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation, run callbacks once and cascade to children."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            children = list(self._children)
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            try:
                callback(reason)
            except Exception:  # noqa: BLE001 - one bad listener must not block the others
                _logger.exception("cancel callback failed")
        for child in children:
            child.cancel(reason)

    def on_cancel(self, callback: CancelCallback) -> None:
        """Register ``callback``; runs immediately if already cancelled."""
        with self._lock:
            if not self._state.cancelled:
                self._callbacks.append(callback)
                return
            reason = self._state.reason
        callback(reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        with self._lock:
            self._children.append(token)
            should_cancel = self._state.cancelled
            reason = self._state.reason
        if should_cancel:
            token.cancel(reason)
        return token

    def child(self) -> "CancellationToken":
        """Create and link a child token."""
        return CancellationToken(parent=self)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, children={len(self._children)})"
        )


__all__ = ["CancellationToken", "CancelCallback"]
