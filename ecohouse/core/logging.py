"""Logging setup: stdout, text or JSON lines, uvicorn routed through root.

Driven by environment variables rather than Settings so it can run before
the typed configuration is loaded.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
import sys
from datetime import UTC, datetime
from typing import Any

# Extras attached by middleware, exception handlers and services.
LOG_EXTRA_KEYS = (
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
    "error_type",
    "event",
    "user_id",
    "house_id",
    "attempt",
)


def env_bool(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with known extras lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        extras = record.__dict__
        for key in LOG_EXTRA_KEYS:
            if key in extras:
                value = extras[key]
                # UUIDs and dates are common here; keep them readable.
                payload[key] = (
                    value
                    if isinstance(value, (str, int, float, bool, type(None)))
                    else str(value)
                )

        return json.dumps(payload, ensure_ascii=False)


def build_logging_config() -> dict[str, Any]:
    """dictConfig for the service, driven by environment variables.

    - LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    - LOG_JSON: one JSON object per line instead of text (default: false)
    - LOG_REQUESTS: the access log middleware (default: true)
    - LOG_UVICORN_ACCESS: uvicorn's own access log; defaults to the opposite
      of LOG_REQUESTS so requests are not logged twice
    - HTTPX_LOG_LEVEL: per-call logs for auth provider traffic (default: WARNING)
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    uvicorn_access = env_bool(
        "LOG_UVICORN_ACCESS", default=not env_bool("LOG_REQUESTS", default=True)
    )

    # Library loggers propagate to the root console handler.
    library_levels = {
        "uvicorn": level,
        "uvicorn.error": level,
        "uvicorn.access": "INFO" if uvicorn_access else "WARNING",
        "httpx": os.getenv("HTTPX_LOG_LEVEL", "WARNING").upper(),
        "sqlalchemy.engine": "WARNING",
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            },
            "json": {"()": "ecohouse.core.logging.JsonFormatter"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "json" if env_bool("LOG_JSON", default=False) else "text",
                "stream": sys.stdout,
            }
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            name: {"level": lib_level, "propagate": True}
            for name, lib_level in library_levels.items()
        },
    }


def configure_logging() -> None:
    logging.config.dictConfig(build_logging_config())
