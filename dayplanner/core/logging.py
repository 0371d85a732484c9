"""Centralized logging configuration."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Mapping

from dayplanner.core.context import get_request_id

_configured = False


class RequestIdFilter(logging.Filter):
    """Stamp every record with the id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - minimal logic
        record.request_id = get_request_id() or "-"
        return True


def configure_logging(*, log_level: str = "INFO", overrides: Mapping[str, str] | None = None) -> None:
    """Configure application logging once at startup.

    ``overrides`` maps logger names to levels, e.g. ``{"dayplanner.services": "DEBUG"}``
    to surface engine no-ops (merge on the last block, undersized split).
    """
    global _configured
    if _configured:
        return

    loggers = {name: {"level": level.upper()} for name, level in (overrides or {}).items()}
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
                }
            },
            "filters": {
                "request_id": {
                    "()": "dayplanner.core.logging.RequestIdFilter",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": log_level,
                    "filters": ["request_id"],
                }
            },
            "loggers": loggers,
            "root": {
                "handlers": ["console"],
                "level": log_level,
            },
        }
    )

    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
    _configured = True
