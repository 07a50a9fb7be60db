"""Logging setup for the mdsite namespace"""

import logging
import sys


LOGGER_NAME = "mdsite"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
HANDLER_NAME = "mdsite.stderr"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the mdsite logger with a single stderr handler. Safe to call repeatedly.

    A repeated call points the existing handler at the current sys.stderr.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    handler = next((h for h in logger.handlers if h.get_name() == HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    else:
        handler.setStream(sys.stderr)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child logger, e.g. get_logger('store') -> 'mdsite.store'."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
