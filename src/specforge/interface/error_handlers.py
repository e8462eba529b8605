"""Map SpecForge errors onto HTTP responses.

Every error body has the shape ``{"status": "error", "message": "..."}``.
The status code comes from the most specific class in ``STATUS_BY_ERROR``
along the exception's MRO, so a ``ClientConstructionError`` is a 422 even
though it is also an ``LlmError``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from specforge.domain.exceptions import (
    ClientConstructionError,
    ConnectionTestError,
    LlmError,
    NoActiveConfigurationError,
    SpecForgeError,
    UnsupportedProviderError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[SpecForgeError], int] = {
    ClientConstructionError: 422,
    UnsupportedProviderError: 422,
    NoActiveConfigurationError: 409,
    ConnectionTestError: 400,
    LlmError: 502,
    SpecForgeError: 500,
}

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def status_for(exc: SpecForgeError) -> int:
    """Resolve the HTTP status for *exc* from its nearest mapped ancestor."""
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


def describe_validation_errors(errors: Iterable[dict[str, Any]]) -> str:
    """Flatten pydantic error entries into ``"body.field: msg"`` pairs."""
    parts = []
    for err in errors:
        where = ".".join(str(p) for p in err.get("loc", ())) or "request"
        parts.append(f"{where}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


async def _on_domain_error(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, SpecForgeError)
    code = status_for(exc)
    if code >= 500 and not isinstance(exc, LlmError):
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
        return _envelope(code, INTERNAL_ERROR_MESSAGE)
    logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return _envelope(code, str(exc))


async def _on_validation_error(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    return _envelope(422, describe_validation_errors(exc.errors()))


async def _on_unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(500, INTERNAL_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain, validation and fallback handlers on *app*."""
    app.add_exception_handler(SpecForgeError, _on_domain_error)
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(Exception, _on_unhandled)
