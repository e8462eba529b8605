"""Logging bootstrap — application and MCP channels with rotating JSON files.

Both channels write one JSON object per line to their own rotating file and
mirror human-readable lines to stdout.  The MCP channel does not propagate,
so its records never land in the application file.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from specforge.infrastructure.config import Settings

APP_LOGGER = "specforge"
MCP_LOGGER = "specforge.mcp"

_CONSOLE_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_HANDLER_TAG = "_specforge_handler"


class JsonFormatter(logging.Formatter):
    """Production-shaped JSON encoding with ISO-8601 timestamps."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname.lower(),
            "logger": record.name,
            "caller": f"{record.module}.py:{record.lineno}",
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["stacktrace"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _file_handler(path: Path, settings: Settings) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    return handler


def _console_handler() -> logging.StreamHandler:  # type: ignore[type-arg]
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    return handler


def _attach(logger: logging.Logger, handlers: list[logging.Handler], level: str) -> None:
    for existing in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(existing)
        existing.close()
    for handler in handlers:
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)
    logger.setLevel(level.upper())


def configure_logging(settings: Settings) -> None:
    """Install both channels; calling it again replaces earlier handlers."""
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    app_logger = logging.getLogger(APP_LOGGER)
    _attach(
        app_logger,
        [_file_handler(log_dir / "server.log", settings), _console_handler()],
        settings.log_level,
    )

    mcp_logger = logging.getLogger(MCP_LOGGER)
    _attach(
        mcp_logger,
        [_file_handler(log_dir / "mcp.log", settings), _console_handler()],
        settings.log_level,
    )
    mcp_logger.propagate = False


def get_mcp_logger() -> logging.Logger:
    """Return the MCP channel logger."""
    return logging.getLogger(MCP_LOGGER)
