"""
Utility modules for the agent actions system.
"""

from .text import TextProcessor
from .date import DateParser, TimeParser
from .validation import ValidationUtils
from .logging import configure_logging, get_logger

__all__ = [
    "TextProcessor",
    "DateParser",
    "TimeParser",
    "ValidationUtils",
    "configure_logging",
    "get_logger",
]
