"""FastAPI dependency injection wiring."""

from __future__ import annotations

from specforge.infrastructure.config import get_settings
from specforge.infrastructure.llm_factory import create_gateway
from specforge.services.completeness_scorer import (
    CompletenessScorer,
    new_completeness_scorer,
)
from specforge.services.llm_settings import LlmSettingsService

_llm_settings: LlmSettingsService | None = None
_scorer: CompletenessScorer | None = None


async def startup() -> None:
    """Initialise shared services — called from the lifespan context manager."""
    global _llm_settings, _scorer  # noqa: PLW0603

    settings = get_settings()
    _llm_settings = LlmSettingsService(
        factory=create_gateway,
        active=settings.llm_configuration(),
    )
    _scorer = new_completeness_scorer()


async def shutdown() -> None:
    """Drop shared services."""
    global _llm_settings, _scorer  # noqa: PLW0603

    _llm_settings = None
    _scorer = None


def get_scorer() -> CompletenessScorer:
    assert _scorer is not None, "startup() was not called"
    return _scorer


def get_llm_settings() -> LlmSettingsService:
    assert _llm_settings is not None, "startup() was not called"
    return _llm_settings
