"""
Logging setup for applications embedding optimal_bbox.

The library only creates module loggers under "optimal_bbox"; call
`setup_logging(logging.DEBUG)` to see one line per generation.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "optimal_bbox"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Send 'optimal_bbox' records to stdout, and to `log_file` when given."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
