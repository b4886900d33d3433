"""Logging setup for the API process."""

from __future__ import annotations

import logging
import sys

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s | %(levelname).1s | %(name)-30.30s | %(message)s"

# The request middleware in ``cryptoquest.app`` already logs every call.
_QUIET_LOGGERS = ("uvicorn.access",)


def setup_logging(level: int | str = LOG_LEVEL) -> logging.Logger:
    """Send all records to stdout and return the ``cryptoquest`` logger."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logging.getLogger("cryptoquest")


__all__ = ["LOG_FORMAT", "setup_logging"]
