"""Structured logging helpers shared by the API and gateways."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from ..config import LoggingConfig

__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "configure_logging",
    "extract_extra",
    "get_logger",
]

ROOT_LOGGER_NAME = "daybook"
CONSOLE_FORMAT = "%(asctime)s [%(name)s:%(levelname)s] %(message)s"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""

    return logging.getLogger(name)


def extract_extra(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, event, extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(extract_extra(record))
        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines with extras appended as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(CONSOLE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = extract_extra(record)
        if extra:
            line += " " + " ".join(f"{key}={value}" for key, value in extra.items())
        return line


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Install a single stdout handler on the root logger."""

    level = getattr(logging, config.level.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JsonFormatter() if config.format == "json" else ConsoleFormatter()
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_daybook_handler", False):
            root.removeHandler(existing)
    handler._daybook_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(level)

    for name in ("uvicorn.error", "uvicorn.access", "fastapi"):
        logging.getLogger(name).setLevel(level)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.info("logging_configured", extra={"level": config.level, "format": config.format})
    return logger
