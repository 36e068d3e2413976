from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Optional, Union

from settings import get_settings

# Keys passed through ``extra=`` by the monitor, in display order.
CONTEXT_KEYS = ("stage", "severity", "status", "tag", "location", "reason")


class ContextualFormatter(logging.Formatter):
    """Appends monitor context (stage, alert tag, location...) after the message."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = " ".join(
            f"{key}={getattr(record, key)}" for key in CONTEXT_KEYS if getattr(record, key, None) is not None
        )
        return f"{message} | {context}" if context else message


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
    """Install the service log handler. Safe to call more than once."""
    log_level = level if level is not None else get_settings().log_level
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "monitor": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "monitor",
                }
            },
            "root": {"handlers": ["console"], "level": log_level},
        }
    )
