"""Shared fixtures: an in-process gateway stub and HTTP transport helpers."""

from __future__ import annotations

import asyncio
import json
from typing import Callable, Sequence

import httpx
import pytest


class StubGateway:
    """Deterministic ``LlmGateway`` used by service and API tests."""

    def __init__(
        self,
        fragments: Sequence[str] = ("Hel", "lo"),
        *,
        models: Sequence[str] = ("stub-small", "stub-large"),
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.fragments = list(fragments)
        self.models = list(models)
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []
        self.closed = False
        self.cancelled = False
        self.cancelled_before_close = False

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return "".join(self.fragments)

    async def stream_generate(self, prompt: str, sink: asyncio.Queue[str]) -> None:
        self.prompts.append(prompt)
        try:
            for fragment in self.fragments:
                await sink.put(fragment)
                if self.delay:
                    await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error

    async def test_connection(self) -> None:
        await self.generate("ping")

    async def list_models(self) -> list[str]:
        if self.error is not None:
            raise self.error
        return list(self.models)

    async def close(self) -> None:
        self.cancelled_before_close = self.cancelled
        self.closed = True


def mock_client(handler: Callable[[httpx.Request], object]) -> httpx.AsyncClient:
    """An ``AsyncClient`` whose requests are answered by *handler*."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))  # type: ignore[arg-type]


def request_json(request: httpx.Request) -> dict[str, object]:
    return json.loads(request.content)


@pytest.fixture
def stub_gateway() -> StubGateway:
    return StubGateway()
