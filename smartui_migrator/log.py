"""Logging setup.

The scanner never reaches for a module-level logger on its own; callers hand
one in (``Scanner(..., logger=...)``). ``configure_logging`` is what the CLI
uses, ``null_logger`` is what tests use.

Environment:
    SMARTUI_LOG_LEVEL: console level when not verbose (default WARNING)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

LOGGER_NAME = "smartui_migrator"
LOG_FORMAT = "[%(asctime)s] %(levelname)-7s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def _console_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    return getattr(logging, os.getenv("SMARTUI_LOG_LEVEL", "WARNING").upper(), logging.WARNING)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the package logger."""
    logger = get_logger()
    level = _console_level(verbose)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console)
    logger.propagate = False
    return logger


def null_logger() -> logging.Logger:
    """A detached logger that discards everything."""
    logger = logging.Logger(f"{LOGGER_NAME}.null")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger
