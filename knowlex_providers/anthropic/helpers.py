"""Wire-format helpers for the Claude-style adapter.

Translation between canonical types and the ``/v1/messages`` JSON:

- system messages are hoisted into the top-level ``system`` block array;
- image parts must be base64 data URLs of a supported media type; remote
  URLs are dropped with a warning;
- response ``text`` blocks are joined with newlines, ``tool_use`` blocks
  become tool calls and ``thinking`` blocks become reasoning.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..base.dto import ModelConfig
from ..base.errors import ValidationError
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ContentPart, Message, ModelCapabilities, Response, ToolCall
from ..base.streaming import split_inline_reasoning
from ..base.tokens import extract_anthropic_token_usage
from ..base.utils import extract_text_content, parse_data_url
from ..config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_DEFAULT_BASE_URL

_logger = get_logger("knowlex_providers.anthropic")

SUPPORTED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


def to_claude_part(part: ContentPart, ctx: Optional[LogContext] = None) -> Optional[Dict[str, Any]]:
    """Claude content block for ``part``, or ``None`` when it must be dropped."""
    if part.type == "text":
        return {"type": "text", "text": part.text or ""}
    inline = parse_data_url(part.image_url or "")
    if inline is None:
        log_event(_logger, "adapter.image.dropped", ctx, level=logging.WARNING, reason="remote_url")
        return None
    media_type = "image/jpeg" if inline.media_type == "image/jpg" else inline.media_type
    if media_type not in SUPPORTED_IMAGE_TYPES:
        log_event(
            _logger,
            "adapter.image.dropped",
            ctx,
            level=logging.WARNING,
            reason="unsupported_media_type",
            media_type=media_type,
        )
        return None
    return {"type": "image", "source": {"type": "base64", "media_type": media_type, "data": inline.data}}


def to_claude_messages(
    messages: Sequence[Message], ctx: Optional[LogContext] = None
) -> Tuple[Optional[List[Dict[str, str]]], List[Dict[str, Any]]]:
    """Return ``(system_blocks, messages)`` in Claude wire form.

    Raises:
        ValidationError: when dropping unsupported images leaves a message
            without any content.
    """
    system: List[Dict[str, str]] = []
    out: List[Dict[str, Any]] = []
    for index, message in enumerate(messages):
        if message.role == "system":
            text = extract_text_content(message).strip()
            if text:
                system.append({"type": "text", "text": text})
            continue
        if isinstance(message.content, str):
            out.append({"role": message.role, "content": message.content})
            continue
        blocks = [b for b in (to_claude_part(p, ctx) for p in message.content) if b is not None]
        if not blocks:
            raise ValidationError(
                f"Message {index} has no content Claude accepts (only inline base64 images are supported)",
                provider=ctx.provider if ctx and ctx.provider else "-",
                model=ctx.model if ctx else None,
            )
        out.append({"role": message.role, "content": blocks})
    return (system or None), out


def messages_url(config: ModelConfig) -> str:
    return (config.base_url or ANTHROPIC_DEFAULT_BASE_URL).rstrip("/") + "/v1/messages"


def build_headers(config: ModelConfig, *, stream: bool) -> Dict[str, str]:
    return {
        "x-api-key": config.api_key,
        "anthropic-version": str(config.extra.get("anthropic_version") or ANTHROPIC_API_VERSION),
        "content-type": "application/json",
        "accept": "text/event-stream" if stream else "application/json",
    }


def build_request_body(
    config: ModelConfig,
    messages: Sequence[Message],
    *,
    stream: bool,
    ctx: Optional[LogContext] = None,
) -> Dict[str, Any]:
    system, wire_messages = to_claude_messages(messages, ctx)
    body: Dict[str, Any] = {
        "model": config.model,
        "messages": wire_messages,
        "max_tokens": config.effective_max_tokens,
        "temperature": config.effective_temperature,
        "stream": stream,
    }
    if system:
        body["system"] = system
    if config.top_p is not None:
        body["top_p"] = config.top_p
    stop_sequences = config.extra.get("stop_sequences")
    if stop_sequences:
        body["stop_sequences"] = list(stop_sequences)
    metadata = config.extra.get("metadata")
    if metadata:
        body["metadata"] = dict(metadata)
    return body


def response_from_message(payload: Dict[str, Any], capabilities: ModelCapabilities) -> Response:
    """Convert a ``message`` object into a :class:`Response`."""
    texts: List[str] = []
    thinking: List[str] = []
    calls: List[ToolCall] = []
    for block in payload.get("content") or []:
        kind = (block or {}).get("type")
        if kind == "text":
            texts.append(str(block.get("text") or ""))
        elif kind == "thinking":
            thinking.append(str(block.get("thinking") or ""))
        elif kind == "tool_use":
            args = block.get("input")
            calls.append(
                ToolCall(
                    id=str(block.get("id") or f"toolu_{len(calls)}"),
                    name=str(block.get("name") or ""),
                    arguments=args if isinstance(args, dict) else {},
                )
            )
    text = "\n".join(texts)
    reasoning: Optional[str] = "\n".join(t for t in thinking if t) or None
    if reasoning is None and capabilities.supports_reasoning:
        text, reasoning = split_inline_reasoning(text)
    return Response(
        text=text,
        reasoning=reasoning,
        tool_calls=calls,
        usage=extract_anthropic_token_usage(payload),
    )


__all__ = [
    "SUPPORTED_IMAGE_TYPES",
    "to_claude_messages",
    "messages_url",
    "build_headers",
    "build_request_body",
    "response_from_message",
]
