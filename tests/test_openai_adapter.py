from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from conftest import mock_client, request_json
from specforge.domain.exceptions import (
    EmptyResponseError,
    LlmProtocolError,
    LlmTransportError,
)
from specforge.infrastructure.llm.openai_adapter import OpenAIAdapter

API_KEY = "sk-test-secret"


def _completion(content: str | None, *, choices: bool = True) -> dict[str, object]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": (
            [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ]
            if choices
            else []
        ),
    }


def _chunk(content: str | None, *, with_choice: bool = True) -> bytes:
    payload = {
        "id": "chatcmpl-1",
        "object": "chat.completion.chunk",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": (
            [{"index": 0, "delta": {"content": content}, "finish_reason": None}]
            if with_choice
            else []
        ),
    }
    return f"data: {json.dumps(payload)}\n\n".encode()


def _sse_response(*chunks: bytes) -> httpx.Response:
    return httpx.Response(
        200,
        headers={"content-type": "text/event-stream"},
        content=b"".join(chunks) + b"data: [DONE]\n\n",
    )


def _adapter(handler) -> OpenAIAdapter:
    return OpenAIAdapter(API_KEY, "gpt-4o-mini", http_client=mock_client(handler))


async def test_generate_sends_single_user_message():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_completion("Hello"))

    assert await _adapter(handler).generate("hi") == "Hello"

    body = request_json(seen[0])
    assert seen[0].url.path.endswith("/chat/completions")
    assert body["model"] == "gpt-4o-mini"
    assert body["messages"] == [{"role": "user", "content": "hi"}]
    assert seen[0].headers["authorization"] == f"Bearer {API_KEY}"


async def test_generate_rejects_empty_choices():
    adapter = _adapter(lambda request: httpx.Response(200, json=_completion(None, choices=False)))

    with pytest.raises(EmptyResponseError):
        await adapter.generate("hi")


async def test_generate_null_content_is_empty_text():
    adapter = _adapter(lambda request: httpx.Response(200, json=_completion(None)))
    assert await adapter.generate("hi") == ""


async def test_status_error_is_protocol_error_without_retry():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500, json={"error": {"message": "boom", "type": "server_error"}})

    with pytest.raises(LlmProtocolError, match="500"):
        await _adapter(handler).generate("hi")
    assert len(calls) == 1


async def test_authentication_error_does_not_leak_key():
    adapter = _adapter(
        lambda request: httpx.Response(
            401, json={"error": {"message": "Incorrect API key", "type": "invalid_request_error"}}
        )
    )

    with pytest.raises(LlmProtocolError) as excinfo:
        await adapter.generate("hi")
    assert API_KEY not in str(excinfo.value)


async def test_connection_failure_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(LlmTransportError):
        await _adapter(handler).generate("hi")


async def test_stream_forwards_deltas_in_order():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _sse_response(
            _chunk(""),
            _chunk("Hel"),
            _chunk("lo"),
            _chunk(None),
            _chunk(None, with_choice=False),
        )

    sink: asyncio.Queue[str] = asyncio.Queue()
    await _adapter(handler).stream_generate("hi", sink)

    received = []
    while not sink.empty():
        received.append(sink.get_nowait())
    assert received == ["Hel", "lo"]
    assert request_json(seen[0])["stream"] is True


async def test_stream_status_error_is_protocol_error():
    adapter = _adapter(
        lambda request: httpx.Response(503, json={"error": {"message": "overloaded"}})
    )

    with pytest.raises(LlmProtocolError, match="503"):
        await adapter.stream_generate("hi", asyncio.Queue())


async def test_list_models_projects_ids():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/models")
        return httpx.Response(
            200,
            json={
                "object": "list",
                "data": [
                    {"id": "gpt-4o", "object": "model", "created": 0, "owned_by": "openai"},
                    {"id": "gpt-4o-mini", "object": "model", "created": 0, "owned_by": "openai"},
                ],
            },
        )

    assert await _adapter(handler).list_models() == ["gpt-4o", "gpt-4o-mini"]


async def test_test_connection_pings():
    prompts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        prompts.append(request_json(request)["messages"][0]["content"])  # type: ignore[index]
        return httpx.Response(200, json=_completion("pong"))

    await _adapter(handler).test_connection()

    assert prompts == ["ping"]
