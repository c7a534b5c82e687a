"""
Centralized logging configuration.

All modules should use `get_logger(__name__)` to obtain a logger instance.
The library itself only attaches a NullHandler; applications configure
handlers as they see fit, and the CLI calls `configure_logging()`.
"""

import logging
import sys

from softrepo.config import config

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_PACKAGE_LOGGER = "softrepo"
_configured = False

logging.getLogger(_PACKAGE_LOGGER).addHandler(logging.NullHandler())


def configure_logging(level: str | None = None) -> None:
    """
    Send package log records to stdout, once.

    Records stop at the package logger so a configured root logger does
    not print them a second time.

    Args:
        level: Level name, defaults to config.log_level
    """
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, (level or config.log_level).upper(), logging.INFO))
    package_logger.addHandler(handler)
    package_logger.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A logging.Logger under the package logger.
    """
    return logging.getLogger(name)
