"""API routes — thin controllers that delegate to the services."""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import Any, AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from specforge.domain.exceptions import LlmError
from specforge.infrastructure.logging_setup import get_mcp_logger
from specforge.interface.dependencies import get_llm_settings, get_scorer
from specforge.interface.schemas import (
    LlmConfigurationBody,
    MessageResponse,
    ModelsResponse,
    ScoringResponse,
    SubmissionRequest,
)
from specforge.services.completeness_scorer import CompletenessScorer
from specforge.services.fragment_stream import stream_fragments
from specforge.services.llm_settings import LlmSettingsService
from specforge.services.snapshot_merger import merge_snapshots

logger = logging.getLogger(__name__)
mcp_logger = get_mcp_logger()

router = APIRouter()

WARMUP_PROMPT = "Hello, can you confirm you are working?"


def _sse(data: str, event: str | None = None) -> str:
    lines = [f"event: {event}"] if event else []
    lines.extend(f"data: {line}" for line in data.split("\n"))
    return "\n".join(lines) + "\n\n"


# ── Imports ─────────────────────────────────────────────────────────────────


@router.post(
    "/imports/score",
    response_model=ScoringResponse,
    responses={422: {"description": "No documents submitted"}},
)
async def score_submission(
    body: SubmissionRequest,
    scorer: CompletenessScorer = Depends(get_scorer),
) -> ScoringResponse:
    """Merge the submitted batches and grade their completeness."""
    documents = merge_snapshots(body.batches)
    result = scorer.score_submission(documents)
    mcp_logger.info(
        "Import submission scored %d with %d batch(es); missing: %s",
        result.score,
        len(body.batches),
        ", ".join(result.missing_categories) or "none",
    )
    return ScoringResponse.from_result(result)


# ── LLM settings ────────────────────────────────────────────────────────────


@router.get("/llm/config", response_model=None)
async def get_config(
    service: LlmSettingsService = Depends(get_llm_settings),
) -> LlmConfigurationBody | dict[str, Any]:
    """Return the active configuration with its API key masked."""
    config = service.get_active_config()
    if config is None:
        return {"data": None}
    return LlmConfigurationBody.from_domain(config)


@router.put("/llm/config", response_model=LlmConfigurationBody)
async def update_config(
    body: LlmConfigurationBody,
    service: LlmSettingsService = Depends(get_llm_settings),
) -> LlmConfigurationBody:
    """Replace the active configuration."""
    config = service.update_config(body.to_domain())
    return LlmConfigurationBody.from_domain(config)


@router.post(
    "/llm/test-connection",
    response_model=MessageResponse,
    responses={400: {"description": "Connection failed"}},
)
async def test_connection(
    body: LlmConfigurationBody,
    service: LlmSettingsService = Depends(get_llm_settings),
) -> MessageResponse:
    """Check a candidate configuration with a ping generation."""
    await service.test_configuration(body.to_domain())
    return MessageResponse(message="Connection successful")


@router.post(
    "/llm/models",
    response_model=ModelsResponse,
    responses={502: {"description": "LLM provider error"}},
)
async def list_models(
    body: LlmConfigurationBody,
    service: LlmSettingsService = Depends(get_llm_settings),
) -> ModelsResponse:
    """List the models a candidate configuration can reach."""
    models = await service.list_models(body.to_domain())
    return ModelsResponse(models=models)


@router.get("/llm/warmup", responses={409: {"description": "No active configuration"}})
async def warmup(
    service: LlmSettingsService = Depends(get_llm_settings),
) -> StreamingResponse:
    """Stream a short greeting from the active model as server-sent events."""
    gateway = service.open_client()

    async def events() -> AsyncIterator[str]:
        try:
            async with aclosing(stream_fragments(gateway, WARMUP_PROMPT)) as fragments:
                async for fragment in fragments:
                    yield _sse(fragment)
            yield _sse("{}", event="done")
        except LlmError as exc:
            logger.warning("Warmup stream failed: %s", exc)
            yield _sse(str(exc), event="error")
        finally:
            await gateway.close()

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
