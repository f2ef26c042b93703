"""Centralized logging configuration for the application."""

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "payopt"


def setup_logging(
    level: str = "INFO", stream: Optional[TextIO] = None
) -> logging.Logger:
    """Configure and return the application logger.

    Sets up a consistent log format across the entire application
    with timestamps, log level, module name, and the message.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        stream: Where records are written. Defaults to stdout; the CLI
            passes stderr so the usage report stays clean.

    Returns:
        The configured root application logger.
    """
    log_format = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Prevent duplicate logs if called multiple times
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the payopt namespace.

    Usage:
        from payopt.core.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Allocating batch")

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A child logger with the given name.
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
