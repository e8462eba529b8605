"""OpenAI adapter — implements the LlmGateway port over chat completions."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    AsyncOpenAI,
    AuthenticationError,
    OpenAIError,
)

from specforge.domain.exceptions import (
    EmptyResponseError,
    LlmError,
    LlmProtocolError,
    LlmTransportError,
)

logger = logging.getLogger(__name__)


class OpenAIAdapter:
    """Concrete ``LlmGateway`` backed by the OpenAI chat-completions API."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        # No retries and no client-side timeout: callers own both concerns.
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or None,
            max_retries=0,
            timeout=None,
            http_client=http_client,
        )
        self._model = model

    def _request(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
        }

    async def generate(self, prompt: str) -> str:
        """Send *prompt* as a single user message and return the reply text."""
        try:
            response = await self._client.chat.completions.create(**self._request(prompt))  # type: ignore[call-overload]
        except OpenAIError as exc:
            raise _translate(exc) from exc

        if not response.choices:
            raise EmptyResponseError("empty response from openai: no choices returned")
        return response.choices[0].message.content or ""

    async def stream_generate(self, prompt: str, sink: asyncio.Queue[str]) -> None:
        """Forward each streamed delta to *sink* until the stream ends."""
        try:
            stream = await self._client.chat.completions.create(  # type: ignore[call-overload]
                **self._request(prompt), stream=True
            )
            async with stream:
                async for chunk in stream:
                    if not chunk.choices:
                        continue
                    content = chunk.choices[0].delta.content
                    if content:
                        await sink.put(content)
        except OpenAIError as exc:
            raise _translate(exc) from exc

    async def test_connection(self) -> None:
        await self.generate("ping")

    async def list_models(self) -> list[str]:
        """Return model ids in the order the API lists them."""
        models: list[str] = []
        try:
            async for model in self._client.models.list():
                models.append(model.id)
        except OpenAIError as exc:
            raise _translate(exc) from exc
        return models

    async def close(self) -> None:
        """Release underlying HTTP resources."""
        await self._client.close()


def _translate(exc: OpenAIError) -> LlmError:
    """Map an SDK exception onto the domain error hierarchy."""
    if isinstance(exc, AuthenticationError):
        return LlmProtocolError(
            "OpenAI rejected the API key (HTTP 401). Check the configured credentials."
        )
    if isinstance(exc, APIStatusError):
        logger.warning("OpenAI returned HTTP %d", exc.status_code)
        return LlmProtocolError(f"openai api error: {exc.status_code} {exc.message}")
    if isinstance(exc, APIConnectionError):
        return LlmTransportError(f"openai request failed: {exc}")
    return LlmError(f"LLM call failed: {exc}")
