"""Configuración de logging para la CLI."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "a1c_tool"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install a single stderr text handler on the package logger.

    Calling it again replaces the handler instead of stacking a new one.

    Raises:
        ValueError: If the level name is unknown.
    """
    level_no = logging.getLevelName(level.upper())
    if not isinstance(level_no, int):
        raise ValueError(f"Unknown log level: {level.upper()}")

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(level_no)
    logger.propagate = False
    return logger
