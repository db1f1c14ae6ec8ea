"""Utilities for logging."""

import logging
import sys
from datetime import datetime, timezone

LOGGER_NAME = "bundler-export-logger"
LOG_FORMAT = "%(asctime)s [%(filename)s] %(levelname)s: %(message)s"


class UTCFormatter(logging.Formatter):
    """Formatter which stamps records with UTC time."""

    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.strftime("%Y-%m-%d %H:%M:%S")


def get_logger() -> logging.Logger:
    """Get the package logger.

    The handler is attached only once, so every module can call this at import time.

    Log format:
        "2025-10-28 00:00:45 [io.py] INFO: message"

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)

    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(UTCFormatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger
