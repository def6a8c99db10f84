# ecogest/core/logging.py
"""Logging configuration."""
import logging
import sys

from .config import settings


def setup_logging():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def sanitize_for_log(value, limit: int = 200) -> str:
    """Strip control characters from user supplied values before logging."""
    return str(value).replace('\n', ' ').replace('\r', ' ').replace('\t', ' ')[:limit]


logger = logging.getLogger(settings.app_name)
