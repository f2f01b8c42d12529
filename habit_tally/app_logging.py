"""Logging configuration helpers."""

import logging


def configure_logging(level: int = logging.WARNING) -> logging.Logger:
    """Configure application logging with a single stream handler."""
    logger = logging.getLogger("habit_tally")
    logger.setLevel(level)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
