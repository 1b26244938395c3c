"""Logging helpers for lazybrowse.

Every module logs through a child of the ``lazybrowse`` logger. The package
logger gets a single stderr handler the first time it is requested.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER_NAME = "lazybrowse"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for ``name`` with the package handler installed."""
    _package_logger()
    return logging.getLogger(name)


def set_verbose(verbose: bool) -> None:
    """Switch the package logger between ``DEBUG`` and ``WARNING``."""
    _package_logger().setLevel(logging.DEBUG if verbose else logging.WARNING)
