"""OpenAI-style adapter over a mocked /chat/completions endpoint."""
from __future__ import annotations

import httpx
import pytest

from knowlex_providers.base.cancellation import CancellationToken
from knowlex_providers.base.dto import ModelConfig
from knowlex_providers.base.errors import APIError, ValidationError
from knowlex_providers.base.models import ContentPart, Message, TokenUsage
from knowlex_providers.base.utils.messages import system_message, user_message
from knowlex_providers.openai import OpenAIProvider
from knowlex_providers.openai.helpers import build_request_body, image_detail

from .support import (
    ChunkedStream,
    Recorder,
    StallingStream,
    chunked_response,
    json_response,
    sse_body,
    sse_response,
)


def _completion(content, *, usage=None, **message_fields):
    message = {"role": "assistant", "content": content, **message_fields}
    payload = {"id": "chatcmpl-1", "object": "chat.completion", "choices": [{"index": 0, "message": message, "finish_reason": "stop"}]}
    if usage is not None:
        payload["usage"] = usage
    return payload


def _model(make_client, recorder, **config):
    config.setdefault("api_key", "sk-test")
    config.setdefault("model", "gpt-4o")
    provider = OpenAIProvider(http_client=make_client(recorder))
    return provider.create_model(ModelConfig(**config))


def _chunk(delta=None, *, finish_reason=None, usage=None, choices=True):
    event = {"object": "chat.completion.chunk", "choices": []}
    if choices:
        event["choices"] = [{"index": 0, "delta": delta or {}, "finish_reason": finish_reason}]
    if usage is not None:
        event["usage"] = usage
    return event


def test_chat_returns_text_and_usage(make_client):
    recorder = Recorder(json_response(_completion("Hi!", usage={"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12})))
    model = _model(make_client, recorder)
    response = model.chat([user_message("Hello")])

    assert response.text == "Hi!"  # nosec B101
    assert response.usage == TokenUsage(9, 3, 12)  # nosec B101
    assert response.usage.total_tokens == response.usage.prompt_tokens + response.usage.completion_tokens  # nosec B101
    request = recorder.requests[0]
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"  # nosec B101
    assert request.headers["Authorization"] == "Bearer sk-test"  # nosec B101
    body = recorder.json_body()
    assert body["model"] == "gpt-4o" and body["stream"] is False  # nosec B101
    assert body["max_tokens"] == 4000 and body["temperature"] == 0.7  # nosec B101
    assert body["messages"] == [{"role": "user", "content": "Hello"}]  # nosec B101


def test_chat_parses_tool_calls(make_client):
    tool_calls = [
        {"id": "call_1", "type": "function", "function": {"name": "get_weather", "arguments": '{"city": "Oslo"}'}},
        {"id": "call_2", "type": "function", "function": {"name": "broken", "arguments": "{oops"}},
    ]
    model = _model(make_client, Recorder(json_response(_completion(None, tool_calls=tool_calls))))
    response = model.chat([user_message("weather?")])
    assert response.text == ""  # nosec B101
    assert [(c.id, c.name, c.arguments) for c in response.tool_calls] == [  # nosec B101
        ("call_1", "get_weather", {"city": "Oslo"}),
        ("call_2", "broken", {"raw": "{oops"}),
    ]


def test_chat_empty_choices_is_api_error(make_client):
    model = _model(make_client, Recorder(json_response({"choices": []})))
    with pytest.raises(APIError) as ei:
        model.chat([user_message("x")])
    assert ei.value.message == "No response choices returned"  # nosec B101


def test_chat_accepts_decoded_tool_arguments_from_compatible_endpoint(make_client):
    tool_calls = [
        {"id": "call_1", "type": "function", "function": {"name": "add", "arguments": {"a": 1}}},
        {"id": "call_2", "type": "function", "function": {"name": "count", "arguments": 5}},
    ]
    recorder = Recorder(json_response(_completion(None, tool_calls=tool_calls)))
    model = _model(make_client, recorder, base_url="http://localhost:11434/v1", model="llama3")
    response = model.chat([user_message("add")])
    assert [(c.name, c.arguments) for c in response.tool_calls] == [  # nosec B101
        ("add", {"a": 1}),
        ("count", {"raw": 5}),
    ]


def test_stream_accepts_decoded_tool_arguments(make_client):
    fragment = {"index": 0, "id": "call_9", "function": {"name": "add", "arguments": {"a": 1}}}
    body = sse_body(_chunk({"tool_calls": [fragment]}), _chunk(finish_reason="tool_calls"))
    model = _model(make_client, Recorder(sse_response(body)), base_url="http://localhost:11434/v1", model="llama3")
    calls = [c.tool_call for c in model.stream([user_message("add")]) if c.tool_call]
    assert [(c.id, c.arguments) for c in calls] == [("call_9", {"a": 1})]  # nosec B101


def test_chat_null_choice_yields_empty_response(make_client):
    model = _model(make_client, Recorder(json_response({"choices": [None]})))
    response = model.chat([user_message("x")])
    assert response.text == "" and response.tool_calls == []  # nosec B101


def test_invalid_messages_fail_before_any_request(make_client):
    recorder = Recorder(json_response(_completion("unused")))
    model = _model(make_client, recorder)
    with pytest.raises(ValidationError):
        model.chat([])
    with pytest.raises(ValidationError):
        model.stream([Message(role="user", content="")])
    assert recorder.calls == 0  # nosec B101


def test_multimodal_parts_and_extras(make_client):
    recorder = Recorder(json_response(_completion("a cat")))
    model = _model(
        make_client,
        recorder,
        top_p=0.9,
        extra={"organization": "org-1", "seed": 7, "stop": ["\n\n"]},
    )
    model.chat(
        [
            system_message("Describe images."),
            Message(
                role="user",
                content=[
                    ContentPart.text_part("What is this?"),
                    ContentPart.image_part("data:image/png;base64,AAAA"),
                    ContentPart.image_part("https://example.test/cat.jpg"),
                ],
            ),
        ]
    )
    body = recorder.json_body()
    parts = body["messages"][1]["content"]
    assert parts[0] == {"type": "text", "text": "What is this?"}  # nosec B101
    assert parts[1]["image_url"]["detail"] == "auto"  # nosec B101
    assert parts[2]["image_url"] == {"url": "https://example.test/cat.jpg", "detail": "high"}  # nosec B101
    assert body["seed"] == 7 and body["stop"] == ["\n\n"] and body["top_p"] == 0.9  # nosec B101
    assert recorder.requests[0].headers["OpenAI-Organization"] == "org-1"  # nosec B101


def test_reasoning_models_use_completion_token_budget():
    provider = OpenAIProvider()
    cfg = ModelConfig(api_key="k", model="o3-mini", temperature=0.3, reasoning_effort="low")
    body = build_request_body(cfg, [user_message("x")], provider.model_capabilities("o3-mini"), stream=False, reasoning_effort="low")
    assert body["max_completion_tokens"] == 4000  # nosec B101
    assert "temperature" not in body and "max_tokens" not in body  # nosec B101
    assert body["reasoning_effort"] == "low"  # nosec B101
    assert image_detail(ContentPart.image_part("https://x.test/a.png", detail="low")) == "low"  # nosec B101


def test_reasoning_effort_rejection_retries_without_it(make_client, log_events):
    recorder = Recorder(
        httpx.Response(400, json={"error": {"message": "Unsupported parameter: 'reasoning_effort'"}}),
        json_response(_completion("fine")),
    )
    model = _model(make_client, recorder, model="o3-mini", reasoning_effort="high")
    assert model.chat([user_message("x")]).text == "fine"  # nosec B101
    assert recorder.json_body(0)["reasoning_effort"] == "high"  # nosec B101
    assert "reasoning_effort" not in recorder.json_body(1)  # nosec B101
    assert log_events.named("adapter.reasoning.fallback")  # nosec B101


def test_inline_thinking_split_for_reasoning_models(make_client):
    model = _model(make_client, Recorder(json_response(_completion("<think>2+2=4</think>4"))), model="o1")
    response = model.chat([user_message("2+2?")])
    assert (response.text, response.reasoning) == ("4", "2+2=4")  # nosec B101


def test_reasoning_content_field_is_first_class(make_client):
    payload = _completion("<think>kept</think>answer", reasoning_content="real reasoning")
    response = _model(make_client, Recorder(json_response(payload)), model="o1").chat([user_message("q")])
    assert response.reasoning == "real reasoning"  # nosec B101
    assert response.text == "<think>kept</think>answer"  # nosec B101


def test_stream_text_usage_and_terminal(make_client):
    body = sse_body(
        _chunk({"role": "assistant", "content": ""}),
        _chunk({"content": "Hel"}),
        _chunk({"content": "lo"}),
        _chunk({}, finish_reason="stop"),
        _chunk(usage={"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7}, choices=False),
    )
    recorder = Recorder(sse_response(body))
    chunks = list(_model(make_client, recorder).stream([user_message("hi")]))

    assert [c.text for c in chunks if c.text] == ["Hel", "lo"]  # nosec B101
    assert [c.finished for c in chunks].count(True) == 1 and chunks[-1].finished  # nosec B101
    assert chunks[-1].usage == TokenUsage(5, 2, 7)  # nosec B101
    sent = recorder.json_body()
    assert sent["stream"] is True and sent["stream_options"] == {"include_usage": True}  # nosec B101
    assert recorder.requests[0].headers["Accept"] == "text/event-stream"  # nosec B101


def test_stream_reassembles_tool_call_fragments(make_client):
    body = sse_body(
        _chunk({"tool_calls": [{"index": 0, "id": "call_9", "function": {"name": "search", "arguments": ""}}]}),
        _chunk({"tool_calls": [{"index": 0, "function": {"arguments": '{"q": '}}]}),
        _chunk({"tool_calls": [{"index": 0, "function": {"arguments": '"llamas"}'}}]}),
        _chunk({}, finish_reason="tool_calls"),
    )
    chunks = list(_model(make_client, Recorder(sse_response(body))).stream([user_message("find")]))
    calls = [c.tool_call for c in chunks if c.tool_call]
    assert len(calls) == 1  # nosec B101
    assert (calls[0].id, calls[0].name, calls[0].arguments) == ("call_9", "search", {"q": "llamas"})  # nosec B101
    assert chunks[-1].finished and chunks[-2].tool_call is not None  # nosec B101


def test_stream_skips_malformed_line(make_client, log_events):
    body = sse_body(_chunk({"content": "a"}), "{not json", _chunk({"content": "b"}))
    chunks = list(_model(make_client, Recorder(sse_response(body))).stream([user_message("x")]))
    assert "".join(c.text or "" for c in chunks) == "ab"  # nosec B101
    assert log_events.named("stream.sse.malformed")  # nosec B101


def test_stream_reasoning_deltas(make_client):
    body = sse_body(
        _chunk({"reasoning_content": "thinking..."}),
        _chunk({"content": "done"}),
    )
    chunks = list(_model(make_client, Recorder(sse_response(body)), model="o3-mini").stream([user_message("x")]))
    assert [c.reasoning for c in chunks if c.reasoning] == ["thinking..."]  # nosec B101
    assert [c.text for c in chunks if c.text] == ["done"]  # nosec B101


def test_stream_cancellation_closes_response(make_client):
    stream = ChunkedStream([sse_body(_chunk({"content": "a"}), _chunk({"content": "b"}), _chunk({"content": "c"}))])
    token = CancellationToken()
    model = _model(make_client, Recorder(chunked_response(stream)))
    out = []
    for chunk in model.stream([user_message("x")], token):
        out.append(chunk)
        if chunk.text == "a":
            token.cancel("stop")
    assert [c.text for c in out] == ["a", None]  # nosec B101
    assert out[-1].finished  # nosec B101
    assert stream.closed  # nosec B101


def test_stream_with_cancelled_token_sends_nothing(make_client):
    recorder = Recorder(sse_response(sse_body()))
    token = CancellationToken()
    token.cancel()
    chunks = list(_model(make_client, recorder).stream([user_message("x")], token))
    assert len(chunks) == 1 and chunks[0].finished  # nosec B101
    assert recorder.calls == 0  # nosec B101


def test_stream_http_error_before_first_chunk(make_client, sleeps):
    model = _model(make_client, Recorder(httpx.Response(401)))
    with pytest.raises(APIError) as ei:
        list(model.stream([user_message("x")]))
    assert ei.value.status_code == 401  # nosec B101


def test_stream_idle_timeout_before_first_chunk_is_retried(make_client, sleeps, log_events):
    stalled = StallingStream(b": keep-alive\n\n")
    recorder = Recorder(
        chunked_response(stalled),
        sse_response(sse_body(_chunk({"content": "hi"}), _chunk(finish_reason="stop"))),
    )
    chunks = list(_model(make_client, recorder).stream([user_message("x")]))
    assert "".join(c.text or "" for c in chunks) == "hi"  # nosec B101
    assert recorder.calls == 2 and sleeps == [1.0]  # nosec B101
    assert stalled.closed  # nosec B101
    assert [e["phase"] for e in log_events.named("http.retry")] == ["retrying", "recovered"]  # nosec B101


def test_stream_idle_timeout_exhausts_retry_budget(make_client, sleeps):
    recorder = Recorder(lambda request: chunked_response(StallingStream()))
    with pytest.raises(APIError) as ei:
        list(_model(make_client, recorder).stream([user_message("x")]))
    assert ei.value.status_code == 0 and "Check your connectivity" in ei.value.message  # nosec B101
    assert recorder.calls == 4 and sleeps == [1.0, 2.0, 4.0]  # nosec B101


def test_stream_timeout_after_output_is_not_replayed(make_client, sleeps):
    stalled = StallingStream(sse_body(_chunk({"content": "par"}), done=False))
    recorder = Recorder(chunked_response(stalled), sse_response(sse_body(_chunk({"content": "unused"}))))
    stream = _model(make_client, recorder).stream([user_message("x")])
    assert next(stream).text == "par"  # nosec B101
    with pytest.raises(APIError) as ei:
        next(stream)
    assert ei.value.status_code == 0  # nosec B101
    assert recorder.calls == 1 and sleeps == []  # nosec B101
    assert stalled.closed  # nosec B101


def test_provider_validation_rules():
    provider = OpenAIProvider()
    assert provider.validate_config(ModelConfig(api_key="k", model="gpt-4o"))  # nosec B101
    assert provider.validate_config(ModelConfig(api_key="k", model="gpt-5-experimental"))  # nosec B101
    assert not provider.validate_config(ModelConfig(api_key="k", model="llama-3"))  # nosec B101
    assert provider.validate_config(ModelConfig(api_key="k", model="llama-3", base_url="http://localhost:8000/v1"))  # nosec B101
    assert provider.model_capabilities("unknown").max_context_length == 4096  # nosec B101
    assert provider.default_config()["base_url"] == "https://api.openai.com/v1"  # nosec B101
