"""
Logging for the history viewer.

Log lines go to stderr by default so that ``reportes list`` / ``reportes
export`` keep stdout for their own output (records, the written path).
"""
from __future__ import annotations

import logging
import sys
from typing import TextIO

from reportes.core.config import get_settings

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def resolve_stream(name: str) -> TextIO:
    """Map the ``log_stream`` setting to a stream; unknown names mean stderr."""
    return sys.stdout if name.strip().lower() == "stdout" else sys.stderr


def get_logger(name: str) -> logging.Logger:
    settings = get_settings()
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(resolve_stream(settings.log_stream))
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
        # records are handled here; avoid duplicates through a configured root
        logger.propagate = False
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger
