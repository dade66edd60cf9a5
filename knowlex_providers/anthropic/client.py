"""Claude-style provider adapter over raw HTTP.

Summary:
- ``ClaudeModel.chat`` posts to ``{base_url}/v1/messages`` with the
  ``x-api-key`` and ``anthropic-version`` headers.
- ``ClaudeModel.stream`` consumes the typed SSE events through
  :func:`prime_sse_stream`, :func:`drive_primed_stream` and
  :class:`ClaudeStreamTranslator`.
- ``ClaudeProvider`` is the registry entry (name ``anthropic``; the alias
  ``claude`` is accepted by resolution).

Reasoning content comes from ``thinking`` blocks when present; otherwise, for
reasoning-capable models, inline ``<thinking>`` tags are split out of the
answer text.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

import httpx

from ..base.cancellation import CancellationToken
from ..base.dto import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, ModelConfig
from ..base.http import get_httpx_client, read_json, send_request
from ..base.logging import LogContext
from ..base.models import Message, ModelCapabilities, ModelInfo, Response, StreamChunk
from ..base.resilience import RetryConfig
from ..base.streaming import PrimedStream, drive_primed_stream, prime_sse_stream
from ..base.utils import validate_messages
from ..config.catalog import (
    CLAUDE_FALLBACK_CAPABILITIES,
    CLAUDE_MODEL_PREFIXES,
    CLAUDE_MODELS,
    list_models,
)
from ..config.defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MODEL,
    ANTHROPIC_DISPLAY_NAME,
    ANTHROPIC_PROVIDER_NAME,
    DEFAULT_TOP_P,
)
from .helpers import build_headers, build_request_body, messages_url, response_from_message
from .stream_helpers import ClaudeStreamTranslator

SERVICE_LABEL = "Claude"


class ClaudeModel:
    """A configured Claude-style chat model."""

    provider_name = ANTHROPIC_PROVIDER_NAME

    def __init__(
        self,
        config: ModelConfig,
        capabilities: ModelCapabilities,
        *,
        http_client: Optional[httpx.Client] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        self._config = config
        self._capabilities = capabilities
        self._client = http_client or get_httpx_client(None, ANTHROPIC_PROVIDER_NAME)
        self._retry_config = retry_config

    def get_config(self) -> ModelConfig:
        return self._config

    def get_capabilities(self) -> ModelCapabilities:
        return self._capabilities

    def chat(self, messages: Sequence[Message]) -> Response:
        validate_messages(messages, provider=self.provider_name, model=self._config.model)
        response = self._post(messages, stream=False)
        payload = read_json(response, provider=self.provider_name, model=self._config.model)
        return response_from_message(payload, self._capabilities)

    def stream(
        self, messages: Sequence[Message], cancellation_token: Optional[CancellationToken] = None
    ) -> Iterator[StreamChunk]:
        validate_messages(messages, provider=self.provider_name, model=self._config.model)
        return self._stream(messages, cancellation_token)

    def _stream(
        self, messages: Sequence[Message], token: Optional[CancellationToken]
    ) -> Iterator[StreamChunk]:
        if token is not None and token.cancelled:
            yield StreamChunk.terminal()
            return
        ctx = self._ctx()

        def prime(response: httpx.Response) -> PrimedStream:
            translator = ClaudeStreamTranslator(
                inline_reasoning=self._capabilities.supports_reasoning,
                provider=self.provider_name,
                model=self._config.model,
            )
            return prime_sse_stream(response, translator, token=token, ctx=ctx)

        primed = self._post(messages, stream=True, prime=prime)
        yield from drive_primed_stream(primed, token=token, ctx=ctx)

    def _ctx(self) -> LogContext:
        return LogContext(provider=self.provider_name, model=self._config.model)

    def _post(
        self,
        messages: Sequence[Message],
        *,
        stream: bool,
        prime: Optional[Callable[[httpx.Response], Any]] = None,
    ) -> Any:
        body = build_request_body(self._config, messages, stream=stream, ctx=self._ctx())
        return send_request(
            self._client,
            "POST",
            messages_url(self._config),
            provider=self.provider_name,
            model=self._config.model,
            service_label=SERVICE_LABEL,
            headers=build_headers(self._config, stream=stream),
            json_body=body,
            stream=stream,
            retry_config=self._retry_config,
            prime=prime,
        )


class ClaudeProvider:
    """Registry entry for the Claude Messages API."""

    name = ANTHROPIC_PROVIDER_NAME
    display_name = ANTHROPIC_DISPLAY_NAME

    def __init__(
        self,
        *,
        http_client: Optional[httpx.Client] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        self._http_client = http_client
        self._retry_config = retry_config

    def create_model(self, config: ModelConfig) -> ClaudeModel:
        return ClaudeModel(
            config,
            self.model_capabilities(config.model),
            http_client=self._http_client,
            retry_config=self._retry_config,
        )

    def validate_config(self, config: ModelConfig) -> bool:
        if not config.api_key.strip() or not config.model.strip():
            return False
        base_url = (config.base_url or ANTHROPIC_DEFAULT_BASE_URL).rstrip("/")
        if base_url != ANTHROPIC_DEFAULT_BASE_URL:
            return True
        return config.model in CLAUDE_MODELS or config.model.startswith(CLAUDE_MODEL_PREFIXES)

    def default_config(self) -> Dict[str, Any]:
        return {
            "base_url": ANTHROPIC_DEFAULT_BASE_URL,
            "model": ANTHROPIC_DEFAULT_MODEL,
            "temperature": DEFAULT_TEMPERATURE,
            "max_tokens": DEFAULT_MAX_TOKENS,
            "top_p": DEFAULT_TOP_P,
        }

    def supported_models(self) -> List[ModelInfo]:
        return list_models(CLAUDE_MODELS)

    def model_capabilities(self, model: str) -> ModelCapabilities:
        info = CLAUDE_MODELS.get(model)
        return info.capabilities if info else CLAUDE_FALLBACK_CAPABILITIES


__all__ = ["ClaudeModel", "ClaudeProvider", "SERVICE_LABEL"]
