"""Logging setup for the roslist command line.

Everything goes to stderr; stdout carries only package listings.
"""

from __future__ import annotations

import logging
import os
import sys

logger = logging.getLogger("roslist")

LOG_LEVEL_ENV = "ROSLIST_LOG_LEVEL"
LOG_FORMAT = "[roslist] %(levelname)s: %(message)s"
HANDLER_NAME = "roslist-stderr"


def _level_from_env() -> int | None:
    raw = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    if not raw:
        return None
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else None


def _stderr_handler() -> logging.Handler | None:
    for handler in logger.handlers:
        if handler.get_name() == HANDLER_NAME:
            return handler
    return None


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Attach a stderr handler to the roslist logger (once) and set its level.

    Default level is WARNING, DEBUG with verbose. ROSLIST_LOG_LEVEL wins over both.
    A handler bound to a stderr that has since been replaced is swapped for a new one.
    """
    level = _level_from_env()
    if level is None:
        level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)

    handler = _stderr_handler()
    if handler is not None and getattr(handler, "stream", None) is not sys.stderr:
        logger.removeHandler(handler)
        handler = None
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
