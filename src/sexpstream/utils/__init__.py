"""Utility modules for sexpstream.

Provides:
- logger: get_logger for logging
"""

from sexpstream.utils.logger import get_logger

__all__ = [
    "get_logger",
]
