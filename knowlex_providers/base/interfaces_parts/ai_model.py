"""AIModel Protocol (single-class module).

The call surface application code uses once a model instance is resolved.
"""

from __future__ import annotations

from typing import Iterator, Optional, Protocol, Sequence, runtime_checkable

from ..cancellation import CancellationToken
from ..dto import ModelConfig
from ..models import Message, ModelCapabilities, Response, StreamChunk


@runtime_checkable
class AIModel(Protocol):
    """A configured model bound to one provider.

    Both calls validate ``messages`` first and raise ``ValidationError``
    before any network activity.
    """

    @property
    def provider_name(self) -> str:
        ...

    def chat(self, messages: Sequence[Message]) -> Response:
        """Return the complete answer for ``messages``."""
        ...

    def stream(
        self, messages: Sequence[Message], cancellation_token: Optional[CancellationToken] = None
    ) -> Iterator[StreamChunk]:
        """Yield chunks lazily; ends with exactly one ``finished`` chunk.

        The iterator is not restartable. Closing it releases the underlying
        HTTP response.
        """
        ...

    def get_capabilities(self) -> ModelCapabilities:
        ...

    def get_config(self) -> ModelConfig:
        ...


__all__ = ["AIModel"]
