"""Logging configuration helpers."""

import logging
import sys
from typing import Optional

from .settings import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(debug: bool = False, level: Optional[str] = None) -> None:
    """
    Configure root logging for applications embedding the cache.

    Args:
        debug: Force DEBUG level (needed to see store tracing)
        level: Explicit level name; defaults to settings.LOG_LEVEL
    """
    if debug:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )
