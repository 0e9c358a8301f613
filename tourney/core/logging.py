"""Process-wide logger."""

from __future__ import annotations

import logging
import sys

from .config import LOG_LEVEL


def setup_logger(name: str) -> logging.Logger:
    """Setup a logger with consistent formatting."""

    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(LOG_LEVEL)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    log.addHandler(handler)
    return log


logger = setup_logger("tourney")


__all__ = ["logger", "setup_logger"]
