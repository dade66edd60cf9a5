"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` is the signal passed to ``stream()`` and to the
streaming session consumer.
"""

from .cancellation_parts.cancellation_token import CancelCallback, CancellationToken

__all__ = ["CancellationToken", "CancelCallback"]
