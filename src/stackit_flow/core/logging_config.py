"""Logging setup for the API process."""
from __future__ import annotations

import logging.config

from stackit_flow.core.settings import settings


def configure_logging(level: str | None = None) -> None:
    """Configure root and package loggers from settings.

    Safe to call more than once; later calls replace the handler configuration.
    """
    log_level = (level or settings.log_level).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "stackit_flow": {"level": log_level},
                "sqlalchemy.engine": {"level": "INFO" if settings.sql_debug else "WARNING"},
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }
    )
