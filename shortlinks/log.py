"""Logging initialization for shortlinks.

Library modules only create loggers (`logging.getLogger(__name__)`); hosts and
scripts call `initialize_logging()` once at startup to attach a handler.

Logging format:
    2026-01-01 12:00:00,000 INFO shortlinks.storage.storage_factory: Selected backend: 'memory'
"""

import logging
import logging.config
from typing import Optional

from shortlinks.config import settings


def initialize_logging(level: Optional[str] = None) -> None:
    log_level = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
                }
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {
                "shortlinks": {
                    "level": log_level,
                    "handlers": ["stdout"],
                    "propagate": False,
                },
            },
        }
    )
