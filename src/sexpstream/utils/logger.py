"""Minimal logging utilities for sexpstream.

Provides a simple get_logger function that wraps the standard library logging.
The library never installs handlers; applications configure logging.

Example:
    >>> from sexpstream.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Reading forms")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "sexpstream." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'sexpstream.mymodule'
    """
    if not (name == "sexpstream" or name.startswith("sexpstream.")):
        name = f"sexpstream.{name}"
    return logging.getLogger(name)
