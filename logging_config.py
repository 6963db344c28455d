from __future__ import annotations

import logging
import time
from logging.config import dictConfig
from typing import Any, Dict, Iterable, Sequence

from settings import get_settings

# ``extra`` keys rendered after the message, in this order
TELEMETRY_CONTEXT_KEYS = (
    "device_id",
    "reading_id",
    "reason",
    "violation_count",
    "alert_count",
    "row_number",
    "error_count",
    "path",
)

_configured = False


class ContextualFormatter(logging.Formatter):
    """Formatter emitting UTC timestamps and a ``key=value`` context tail."""

    converter = time.gmtime

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        context_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._context_keys: Sequence[str] = tuple(context_keys or TELEMETRY_CONTEXT_KEYS)

    def context_of(self, record: logging.LogRecord) -> str:
        return " ".join(
            f"{key}={getattr(record, key)}"
            for key in self._context_keys
            if getattr(record, key, None) is not None
        )

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = self.context_of(record)
        return f"{message} | {context}" if context else message


def build_logging_config(level: str | int) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "telemetry": {
                "()": ContextualFormatter,
                "fmt": "%(asctime)sZ %(levelname)-7s %(name)s: %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S",
                "context_keys": list(TELEMETRY_CONTEXT_KEYS),
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "telemetry",
            }
        },
        "root": {"handlers": ["console"], "level": level},
    }


def configure_logging(level: str | int | None = None) -> None:
    """Install the service logging setup once per process."""
    global _configured
    if _configured:
        return
    dictConfig(build_logging_config(level if level is not None else get_settings().log_level))
    _configured = True
