"""Logger setup for the renderer. Records go to stderr, never the render sink."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


_LOGGER_NAME = "ansi_cells"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, keyed by the renderer ``event`` extra."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "event": getattr(record, "event", None),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def _has_file_handler(logger: logging.Logger, path: Path) -> bool:
    return any(
        isinstance(h, logging.FileHandler) and Path(h.baseFilename).resolve() == path
        for h in logger.handlers
    )


def configure_logging(level: int | str = logging.WARNING, log_file: str | Path | None = None) -> logging.Logger:
    """
    Set the package logger level and attach its handlers. Safe to call again:
    the stderr handler is added once, and a new ``log_file`` gets its own
    JSON file handler alongside any earlier ones.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        logger.addHandler(stream_handler)

    if log_file is not None:
        path = Path(log_file).resolve()
        if not _has_file_handler(logger, path):
            file_handler = logging.FileHandler(str(path), encoding="utf-8")
            file_handler.setFormatter(JsonFormatter())
            logger.addHandler(file_handler)

    logger.debug("logging configured", extra={"event": "logging_configured"})
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)
