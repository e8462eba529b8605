"""Ollama adapter — implements the LlmGateway port over a local model server."""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import BaseModel, ValidationError

from specforge.domain.exceptions import LlmProtocolError, LlmTransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"


# ── Wire types ──────────────────────────────────────────────────────────────


class _GenerateRequest(BaseModel):
    model: str
    prompt: str
    stream: bool


class _GenerateChunk(BaseModel):
    response: str = ""
    done: bool = False


class _TagModel(BaseModel):
    name: str


class _TagsResponse(BaseModel):
    models: list[_TagModel] = []


# ── Adapter ─────────────────────────────────────────────────────────────────


class OllamaAdapter:
    """Concrete ``LlmGateway`` backed by the Ollama HTTP API."""

    def __init__(
        self,
        base_url: str = "",
        model: str = "",
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self._model = model
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=None)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _payload(self, prompt: str, *, stream: bool) -> dict[str, object]:
        return _GenerateRequest(model=self._model, prompt=prompt, stream=stream).model_dump()

    async def generate(self, prompt: str) -> str:
        """POST /api/generate with ``stream: false`` → ``response``."""
        url = f"{self._base_url}/api/generate"
        try:
            resp = await self._client.post(url, json=self._payload(prompt, stream=False))
        except httpx.HTTPError as exc:
            raise LlmTransportError(f"ollama request failed: {exc}") from exc

        _check_status(resp)
        try:
            chunk = _GenerateChunk.model_validate_json(resp.content)
        except ValidationError as exc:
            raise LlmProtocolError("ollama returned a malformed generate response") from exc
        return chunk.response

    async def stream_generate(self, prompt: str, sink: asyncio.Queue[str]) -> None:
        """POST /api/generate with ``stream: true`` and relay NDJSON lines.

        Lines that fail to decode are skipped; ``done: true`` ends the stream.
        """
        url = f"{self._base_url}/api/generate"
        try:
            async with self._client.stream(
                "POST", url, json=self._payload(prompt, stream=True)
            ) as resp:
                _check_status(resp)
                async for line in resp.aiter_lines():
                    try:
                        chunk = _GenerateChunk.model_validate_json(line)
                    except ValidationError:
                        logger.debug("Skipping malformed ollama stream line: %.80r", line)
                        continue
                    if chunk.done:
                        break
                    await sink.put(chunk.response)
        except httpx.HTTPError as exc:
            raise LlmTransportError(f"ollama stream failed: {exc}") from exc

    async def test_connection(self) -> None:
        await self.generate("ping")

    async def list_models(self) -> list[str]:
        """GET /api/tags → model names."""
        url = f"{self._base_url}/api/tags"
        try:
            resp = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise LlmTransportError(f"ollama request failed: {exc}") from exc

        _check_status(resp)
        try:
            tags = _TagsResponse.model_validate_json(resp.content)
        except ValidationError as exc:
            raise LlmProtocolError("ollama returned a malformed tags response") from exc
        return [m.name for m in tags.models]

    async def close(self) -> None:
        """Close the HTTP client when this adapter created it."""
        if self._owns_client:
            await self._client.aclose()


def _check_status(resp: httpx.Response) -> None:
    if resp.status_code != 200:
        raise LlmProtocolError(
            f"ollama api error: {resp.status_code} {resp.reason_phrase}"
        )
