"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from specforge.interface.dependencies import shutdown, startup
from specforge.interface.error_handlers import register_error_handlers
from specforge.interface.routes import router

logger = logging.getLogger(__name__)

API_DESCRIPTION = (
    "Grades project-description submissions for completeness and exposes "
    "a uniform gateway over OpenAI, Gemini and Ollama models."
)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    await startup()
    logger.info("%s %s ready", app.title, app.version)
    try:
        yield
    finally:
        await shutdown()


async def _health() -> dict[str, str]:
    return {"status": "ok"}


def create_app() -> FastAPI:
    """Assemble routes, error handlers and the liveness endpoint."""
    app = FastAPI(
        title="SpecForge Core",
        version="1.0.0",
        description=API_DESCRIPTION,
        lifespan=_lifespan,
    )
    register_error_handlers(app)
    app.include_router(router)
    app.add_api_route("/health", _health, methods=["GET"], include_in_schema=False)
    return app
