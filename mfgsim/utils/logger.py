"""Logging setup shared by all simulator components."""

import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_default_level = logging.INFO
_managed_loggers = set()


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Create or fetch a named logger writing to stderr.

    Calling this more than once for the same name reuses the existing
    handler, so components can call it freely from their constructors.

    Args:
        name: Logger name (usually the class name)
        level: Logging level name or number; defaults to the global level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
        _managed_loggers.add(name)
        logger.setLevel(_default_level)

    if level is not None:
        logger.setLevel(_to_level(level))

    return logger


def set_global_level(level: Union[str, int]) -> None:
    """Apply a level to every logger created through setup_logger, now and later.

    Args:
        level: Logging level name or number
    """
    global _default_level
    _default_level = _to_level(level)

    for name in _managed_loggers:
        logging.getLogger(name).setLevel(_default_level)
