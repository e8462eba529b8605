"""Gemini adapter — implements the LlmGateway port over the google-genai SDK."""

from __future__ import annotations

import asyncio
import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from specforge.domain.exceptions import (
    ClientConstructionError,
    EmptyResponseError,
    LlmError,
    LlmProtocolError,
    LlmTransportError,
    UnexpectedResponseError,
)

logger = logging.getLogger(__name__)


def _first_part(response: types.GenerateContentResponse) -> types.Part | None:
    """Return the first part of the first candidate, if any."""
    if not response.candidates:
        return None
    content = response.candidates[0].content
    if content is None or not content.parts:
        return None
    return content.parts[0]


class GeminiAdapter:
    """Concrete ``LlmGateway`` backed by Google's Gemini API.

    The SDK client is opened once at construction and held until
    :meth:`close`.  A pre-built client may be injected instead.
    """

    def __init__(
        self, api_key: str, model: str, *, client: genai.Client | None = None
    ) -> None:
        if client is None:
            try:
                client = genai.Client(api_key=api_key)
            except Exception as exc:
                raise ClientConstructionError(
                    f"could not create gemini client: {exc}"
                ) from exc
        self._client = client
        self._model = model

    async def generate(self, prompt: str) -> str:
        """Return the text of the first part of the first candidate."""
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model, contents=prompt
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            raise _translate(exc) from exc

        part = _first_part(response)
        if part is None:
            raise EmptyResponseError("empty response from gemini")
        if part.text is None:
            raise UnexpectedResponseError("unexpected response type")
        return part.text

    async def stream_generate(self, prompt: str, sink: asyncio.Queue[str]) -> None:
        """Forward the first text part of each streamed response to *sink*."""
        try:
            stream = await self._client.aio.models.generate_content_stream(
                model=self._model, contents=prompt
            )
            async for response in stream:
                part = _first_part(response)
                if part is not None and part.text is not None:
                    await sink.put(part.text)
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            raise _translate(exc) from exc

    async def test_connection(self) -> None:
        await self.generate("ping")

    async def list_models(self) -> list[str]:
        """Return fully-qualified model names, e.g. ``models/gemini-2.0-flash``."""
        names: list[str] = []
        try:
            pager = await self._client.aio.models.list()
            async for model in pager:
                if model.name:
                    names.append(model.name)
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            raise _translate(exc) from exc
        return names

    async def close(self) -> None:
        """Release the SDK's HTTP resources."""
        await self._client.aio.aclose()


def _translate(exc: Exception) -> LlmError:
    if isinstance(exc, genai_errors.APIError):
        logger.warning("Gemini returned HTTP %s", exc.code)
        return LlmProtocolError(f"gemini api error: {exc.code} {exc.message}")
    return LlmTransportError(f"gemini request failed: {exc}")
