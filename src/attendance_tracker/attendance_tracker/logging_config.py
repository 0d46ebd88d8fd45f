"""Logging configuration for the attendance tracker."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure the package logger with one console handler.

    Safe to call more than once (e.g. one Flask app per test): existing
    handlers installed by this function are replaced, not duplicated.
    """

    level = getattr(logging, str(log_level).upper(), logging.INFO)
    # the package logger, whatever name the package was imported under
    logger = logging.getLogger(__name__.rpartition(".")[0])
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        if getattr(handler, "_attendance_tracker", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._attendance_tracker = True
    logger.addHandler(handler)
    return logger
