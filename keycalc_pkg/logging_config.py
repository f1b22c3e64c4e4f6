"""Structured logging configuration for keycalc.

All loggers live under the ``keycalc`` namespace, so one call to
``setup_logging`` controls the engine, history store, API and CLI.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime

from . import config

ROOT_LOGGER = "keycalc"


class StructuredFormatter(logging.Formatter):
    """Format records as ``<iso timestamp> [LEVEL] keycalc.<module>: message``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds")
        message = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


def setup_logging(level: str | None = None, log_file: str | None = None) -> logging.Logger:
    """Configure the ``keycalc`` logger.

    Args:
        level: DEBUG, INFO, WARNING or ERROR; defaults to ``config.LOG_LEVEL``
            (``KEYCALC_LOG_LEVEL``). Unknown names fall back to WARNING.
        log_file: Also append records to this file; defaults to
            ``config.LOG_FILE`` (``KEYCALC_LOG_FILE``)

    Returns:
        The configured ``keycalc`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    level_name = (level or config.LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level_name, logging.WARNING))
    logger.handlers.clear()
    # Records stop here so a host application's root handlers don't repeat them
    logger.propagate = False

    formatter = StructuredFormatter()
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_file = log_file or config.LOG_FILE
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the ``keycalc.<name>`` child logger for a module."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
