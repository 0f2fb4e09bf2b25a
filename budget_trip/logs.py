"""Shared logger factory."""
from __future__ import annotations

import logging
import os


def get_logger(name: str) -> logging.Logger:
    """Return a module logger writing ``[LEVEL] name: message`` to stderr.

    The level comes from ``TRIP_PLANNER_LOG_LEVEL`` and records do not
    propagate to the root logger, so uvicorn's own handlers stay quiet.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)
    level = os.getenv("TRIP_PLANNER_LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    logger.propagate = False
    return logger
