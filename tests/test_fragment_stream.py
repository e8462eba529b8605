from __future__ import annotations

import asyncio

import pytest

from conftest import StubGateway
from specforge.domain.exceptions import LlmProtocolError
from specforge.services.fragment_stream import stream_fragments


async def test_yields_fragments_in_order():
    gateway = StubGateway(["a", "b", "c", "d"])

    received = [f async for f in stream_fragments(gateway, "hi", maxsize=1)]

    assert received == ["a", "b", "c", "d"]
    assert gateway.prompts == ["hi"]


async def test_matches_generate_output():
    gateway = StubGateway(["Hello", ", ", "world"])

    streamed = "".join([f async for f in stream_fragments(gateway, "hi")])

    assert streamed == await gateway.generate("hi")


async def test_error_surfaces_after_delivered_fragments():
    gateway = StubGateway(["Hel", "lo"], error=LlmProtocolError("ollama api error: 500"))
    received: list[str] = []

    with pytest.raises(LlmProtocolError):
        async for fragment in stream_fragments(gateway, "hi"):
            received.append(fragment)

    assert received == ["Hel", "lo"]


async def test_empty_stream_finishes():
    assert [f async for f in stream_fragments(StubGateway([]), "hi")] == []


async def test_early_exit_cancels_producer():
    gateway = StubGateway([str(i) for i in range(100)], delay=0.01)
    stream = stream_fragments(gateway, "hi")

    async for fragment in stream:
        assert fragment == "0"
        break
    await stream.aclose()
    await asyncio.sleep(0)

    assert gateway.cancelled
