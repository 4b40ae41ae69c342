"""Process-wide logging for the access simulator."""

from __future__ import annotations

import logging
import sys

from backend.utils.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Attach a stdout handler to the root logger, at most once per process."""
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
