"""Logging setup: Rich console output or JSON lines on stderr."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from gcp_resource_cleaner.client.errors import ConfigurationError
from gcp_resource_cleaner.config.constants import LOG_FORMATS

PACKAGE_LOGGER = "gcp_resource_cleaner"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVELS: dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
}

_HANDLER_TAG = "_gcp_cleaner_handler"

# Attributes every LogRecord carries; anything else came in via ``extra``
_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the ``extra={...}`` fields attached to *record*."""
    return {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(record_extras(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class ExtrasFormatter(logging.Formatter):
    """Message followed by ``key=value`` pairs from ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = record_extras(record)
        if not extras:
            return message
        return message + "  " + " ".join(f"{k}={v}" for k, v in extras.items())


def parse_level(level: str) -> int:
    try:
        return LEVELS[level.strip().lower()]
    except KeyError:
        valid = ", ".join(k for k in LEVELS if k != "warning")
        raise ConfigurationError(f"Invalid log level '{level}'. Must be one of: {valid}") from None


def configure_logging(
    level: str = "info",
    fmt: str = "pretty",
    *,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the package logger. Safe to call more than once."""
    level_int = parse_level(level)
    fmt = fmt.strip().lower()
    if fmt not in LOG_FORMATS:
        raise ConfigurationError(
            f"Invalid log format '{fmt}'. Must be one of: {', '.join(LOG_FORMATS)}"
        )

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_TAG, False):
            logger.removeHandler(existing)

    handler: logging.Handler
    if fmt == "json":
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(ExtrasFormatter("%(message)s"))
    setattr(handler, _HANDLER_TAG, True)

    logger.addHandler(handler)
    logger.setLevel(level_int)
    logger.propagate = False
    return logger
