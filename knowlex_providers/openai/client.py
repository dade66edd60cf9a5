"""OpenAI-style provider adapter over raw HTTP.

Summary:
- ``OpenAIModel.chat`` posts to ``{base_url}/chat/completions`` and converts
  the completion into a :class:`Response`.
- ``OpenAIModel.stream`` posts with ``stream: true`` and decodes the SSE body
  through :func:`prime_sse_stream` and :func:`drive_primed_stream`.
- ``OpenAIProvider`` is the registry entry: factory, validator, defaults and
  the model catalog. Any base URL other than the official API is accepted as
  an OpenAI-compatible endpoint.

Timeouts & retries:
- Every request goes through :func:`send_request` (shared retry policy); the
  pooled client carries the timeouts from :func:`get_timeout_config`.
- A stream that stalls before its first chunk is retried like any failed
  request; after output was delivered it fails with a status-0 error.

Reasoning:
- ``reasoning_effort`` is sent only to reasoning-capable models. If the
  endpoint rejects it with a 400, the request is repeated once without it.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

import httpx

from ..base.cancellation import CancellationToken
from ..base.capabilities import resolve_reasoning_effort
from ..base.dto import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, ModelConfig
from ..base.errors import APIError
from ..base.http import get_httpx_client, read_json, send_request
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import Message, ModelCapabilities, ModelInfo, Response, StreamChunk
from ..base.resilience import RetryConfig
from ..base.streaming import PrimedStream, drive_primed_stream, prime_sse_stream
from ..base.utils import validate_messages
from ..config.catalog import (
    OPENAI_FALLBACK_CAPABILITIES,
    OPENAI_MODEL_PREFIXES,
    OPENAI_MODELS,
    list_models,
)
from ..config.defaults import (
    DEFAULT_FREQUENCY_PENALTY,
    DEFAULT_PRESENCE_PENALTY,
    DEFAULT_TOP_P,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENAI_DISPLAY_NAME,
    OPENAI_PROVIDER_NAME,
)
from .helpers import (
    build_headers,
    build_request_body,
    chat_completions_url,
    mentions_reasoning,
    response_from_completion,
)
from .stream_helpers import OpenAIStreamTranslator

SERVICE_LABEL = "OpenAI"


class OpenAIModel:
    """A configured OpenAI-style chat model."""

    provider_name = OPENAI_PROVIDER_NAME

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
        self._client = http_client or get_httpx_client(None, OPENAI_PROVIDER_NAME)
        self._retry_config = retry_config
        self._logger = get_logger("knowlex_providers.openai")

    def get_config(self) -> ModelConfig:
        return self._config

    def get_capabilities(self) -> ModelCapabilities:
        return self._capabilities

    def chat(self, messages: Sequence[Message]) -> Response:
        validate_messages(messages, provider=self.provider_name, model=self._config.model)
        response = self._post(messages, stream=False)
        payload = read_json(response, provider=self.provider_name, model=self._config.model)
        return response_from_completion(
            payload, self._capabilities, provider=self.provider_name, model=self._config.model
        )

    def stream(
        self, messages: Sequence[Message], cancellation_token: Optional[CancellationToken] = None
    ) -> Iterator[StreamChunk]:
        """Lazily stream ``messages``; the request is sent on first iteration.

        Message validation runs eagerly so bad input fails at call time.
        """
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
            translator = OpenAIStreamTranslator(inline_reasoning=self._capabilities.supports_reasoning)
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
        effort = resolve_reasoning_effort(self._config, self._capabilities)
        try:
            return self._send(messages, stream=stream, reasoning_effort=effort, prime=prime)
        except APIError as exc:
            if effort is None or not mentions_reasoning(exc):
                raise
            log_event(self._logger, "adapter.reasoning.fallback", self._ctx(), message=exc.message)
            return self._send(messages, stream=stream, reasoning_effort=None, prime=prime)

    def _send(
        self,
        messages: Sequence[Message],
        *,
        stream: bool,
        reasoning_effort: Optional[str],
        prime: Optional[Callable[[httpx.Response], Any]] = None,
    ) -> Any:
        body = build_request_body(
            self._config,
            messages,
            self._capabilities,
            stream=stream,
            reasoning_effort=reasoning_effort,
        )
        return send_request(
            self._client,
            "POST",
            chat_completions_url(self._config),
            provider=self.provider_name,
            model=self._config.model,
            service_label=SERVICE_LABEL,
            headers=build_headers(self._config, stream=stream),
            json_body=body,
            stream=stream,
            retry_config=self._retry_config,
            prime=prime,
        )


class OpenAIProvider:
    """Registry entry for OpenAI and OpenAI-compatible endpoints.

    Parameters:
        http_client: Optional client shared by every model this provider
            builds (tests pass one backed by ``httpx.MockTransport``).
        retry_config: Optional retry policy override.
    """

    name = OPENAI_PROVIDER_NAME
    display_name = OPENAI_DISPLAY_NAME

    def __init__(
        self,
        *,
        http_client: Optional[httpx.Client] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        self._http_client = http_client
        self._retry_config = retry_config

    def create_model(self, config: ModelConfig) -> OpenAIModel:
        return OpenAIModel(
            config,
            self.model_capabilities(config.model),
            http_client=self._http_client,
            retry_config=self._retry_config,
        )

    def validate_config(self, config: ModelConfig) -> bool:
        """Official endpoint: catalog model or a known family prefix. Custom endpoint: any model."""
        if not config.api_key.strip() or not config.model.strip():
            return False
        base_url = (config.base_url or OPENAI_DEFAULT_BASE_URL).rstrip("/")
        if base_url != OPENAI_DEFAULT_BASE_URL:
            return True
        return config.model in OPENAI_MODELS or config.model.startswith(OPENAI_MODEL_PREFIXES)

    def default_config(self) -> Dict[str, Any]:
        return {
            "base_url": OPENAI_DEFAULT_BASE_URL,
            "model": OPENAI_DEFAULT_MODEL,
            "temperature": DEFAULT_TEMPERATURE,
            "max_tokens": DEFAULT_MAX_TOKENS,
            "top_p": DEFAULT_TOP_P,
            "frequency_penalty": DEFAULT_FREQUENCY_PENALTY,
            "presence_penalty": DEFAULT_PRESENCE_PENALTY,
        }

    def supported_models(self) -> List[ModelInfo]:
        return list_models(OPENAI_MODELS)

    def model_capabilities(self, model: str) -> ModelCapabilities:
        info = OPENAI_MODELS.get(model)
        return info.capabilities if info else OPENAI_FALLBACK_CAPABILITIES


__all__ = ["OpenAIModel", "OpenAIProvider", "SERVICE_LABEL"]
