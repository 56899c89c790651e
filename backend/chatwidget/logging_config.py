"""Logging setup for the widget backend."""

import logging
import sys


def setup_logging(level="INFO", name: str = "chatwidget") -> logging.Logger:
    """
    Attach a stderr handler to the package logger. Calling it again is a no-op.

    Args:
        level: Level name or number.
        name: Logger to configure.

    Returns:
        The configured logger.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    log.setLevel(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    log.addHandler(handler)
    return log
