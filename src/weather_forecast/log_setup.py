"""Logging setup for the forecast service entry points."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from .config import Settings
from .redaction import sanitize_text

# httpx logs every request URL at INFO, and WeatherAPI.com URLs carry the key.
_LIBRARY_LOGGERS = ("httpx",)


class JsonConsoleFormatter(logging.Formatter):
    """JSON formatter for structured console logs.

    Message and traceback text are redacted. `static_fields` are merged into
    every event (e.g. the deployment environment).
    """

    def __init__(self, static_fields: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            **self.static_fields,
            "message": sanitize_text(record.getMessage()),
        }
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, default=str)


def setup_logger(
    name: str = "weather_forecast",
    level: int | str = logging.INFO,
    static_fields: dict[str, Any] | None = None,
) -> logging.Logger:
    """Create or reconfigure a process-wide logger with one JSON console handler."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    formatter = JsonConsoleFormatter(static_fields)
    if logger.handlers:
        for handler in logger.handlers:
            handler.setFormatter(formatter)
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def configure_logging(settings: Settings, name: str = "weather_forecast") -> logging.Logger:
    """Apply LOG_LEVEL and APP_ENV, and route HTTP library logs through redaction.

    Library request logs are only let through at DEBUG.
    """
    static_fields = {"app_env": settings.app_env}
    library_level = logging.DEBUG if settings.log_level == "DEBUG" else logging.WARNING
    for library in _LIBRARY_LOGGERS:
        setup_logger(library, library_level, static_fields)
    return setup_logger(name, settings.log_level, static_fields)
