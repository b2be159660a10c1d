"""
Utilities Module
================

Contains logging setup and the type casting helpers behind typed accessors.
"""

from .logger import setup_logging, get_logger

__all__ = [
    'setup_logging',
    'get_logger',
]
