"""Logging setup shared by the flange designer modules."""

import logging
import os

_LEVEL_NAME = os.getenv("FLANGE_DESIGNER_LOG_LEVEL", "INFO").upper()
_PACKAGE_LOGGER_LEVEL = getattr(logging, _LEVEL_NAME, logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger. Handlers are left to the application (app.py / pytest)."""
    logger = logging.getLogger(name)
    logger.setLevel(_PACKAGE_LOGGER_LEVEL)
    return logger
