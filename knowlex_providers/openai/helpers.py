"""Wire-format helpers for the OpenAI-style adapter.

Pure translation between canonical types and the ``/chat/completions``
request/response JSON. No I/O happens here.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..base.dto import ModelConfig
from ..base.errors import APIError, ErrorCode
from ..base.models import (
    ContentPart,
    Message,
    ModelCapabilities,
    Response,
    ToolCall,
    parse_tool_arguments,
)
from ..base.streaming import split_inline_reasoning
from ..base.tokens import extract_openai_token_usage
from ..config.defaults import OPENAI_DEFAULT_BASE_URL

OPTIONAL_BODY_FIELDS = ("seed", "stop", "user", "logit_bias")


def image_detail(part: ContentPart) -> str:
    """Explicit detail hint, else ``auto`` for inline data and ``high`` for remote URLs."""
    if part.detail:
        return part.detail
    return "auto" if part.is_inline_image else "high"


def to_openai_part(part: ContentPart) -> Dict[str, Any]:
    if part.type == "text":
        return {"type": "text", "text": part.text or ""}
    return {"type": "image_url", "image_url": {"url": part.image_url, "detail": image_detail(part)}}


def to_openai_messages(messages: Sequence[Message]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for message in messages:
        if isinstance(message.content, str):
            out.append({"role": message.role, "content": message.content})
        else:
            out.append({"role": message.role, "content": [to_openai_part(p) for p in message.content]})
    return out


def chat_completions_url(config: ModelConfig) -> str:
    return (config.base_url or OPENAI_DEFAULT_BASE_URL).rstrip("/") + "/chat/completions"


def build_headers(config: ModelConfig, *, stream: bool) -> Dict[str, str]:
    headers = {
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": "application/json",
        "Accept": "text/event-stream" if stream else "application/json",
    }
    organization = config.extra.get("organization")
    if organization:
        headers["OpenAI-Organization"] = str(organization)
    return headers


def build_request_body(
    config: ModelConfig,
    messages: Sequence[Message],
    capabilities: ModelCapabilities,
    *,
    stream: bool,
    reasoning_effort: Optional[str] = None,
) -> Dict[str, Any]:
    """Assemble the request JSON.

    Reasoning models take ``max_completion_tokens`` and reject sampling
    parameters, so those are only sent to non-reasoning models.
    """
    body: Dict[str, Any] = {
        "model": config.model,
        "messages": to_openai_messages(messages),
        "stream": stream,
    }
    if capabilities.supports_reasoning:
        body["max_completion_tokens"] = config.effective_max_tokens
    else:
        body["max_tokens"] = config.effective_max_tokens
        body["temperature"] = config.effective_temperature
        for field in ("top_p", "frequency_penalty", "presence_penalty"):
            value = getattr(config, field)
            if value is not None:
                body[field] = value
    if reasoning_effort:
        body["reasoning_effort"] = reasoning_effort
    for field in OPTIONAL_BODY_FIELDS:
        value = config.extra.get(field)
        if value is not None:
            body[field] = value
    if stream:
        body["stream_options"] = {"include_usage": True}
    return body


def tool_calls_from_message(message: Dict[str, Any]) -> List[ToolCall]:
    calls: List[ToolCall] = []
    for index, raw in enumerate(message.get("tool_calls") or []):
        fn = (raw or {}).get("function") or {}
        name = fn.get("name")
        if not name:
            continue
        calls.append(
            ToolCall(
                id=str(raw.get("id") or f"call_{index}"),
                name=str(name),
                arguments=parse_tool_arguments(fn.get("arguments")),
            )
        )
    return calls


def response_from_completion(
    payload: Dict[str, Any],
    capabilities: ModelCapabilities,
    *,
    provider: str,
    model: str,
) -> Response:
    """Convert a ``chat.completion`` object into a :class:`Response`."""
    choices = payload.get("choices") or []
    if not choices:
        raise APIError(
            "No response choices returned",
            status_code=200,
            code=ErrorCode.SERVER_ERROR,
            provider=provider,
            model=model,
        )
    message = (choices[0] or {}).get("message") or {}
    content = message.get("content")
    text = content if isinstance(content, str) else ""
    reasoning = message.get("reasoning_content") or message.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning:
        reasoning = None
        if capabilities.supports_reasoning:
            text, reasoning = split_inline_reasoning(text)
    return Response(
        text=text,
        reasoning=reasoning,
        tool_calls=tool_calls_from_message(message),
        usage=extract_openai_token_usage(payload),
    )


def mentions_reasoning(error: APIError) -> bool:
    """True for a 400 rejecting the reasoning parameter."""
    return error.status_code == 400 and "reasoning" in error.message.lower()


__all__ = [
    "image_detail",
    "to_openai_messages",
    "chat_completions_url",
    "build_headers",
    "build_request_body",
    "tool_calls_from_message",
    "response_from_completion",
    "mentions_reasoning",
]
