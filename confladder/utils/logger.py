"""
Logging Utilities
=================

Logging setup for the confladder command line and embedding applications.
Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by the entry point.
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_SIZE_UNITS = (
    ('GB', 1024 ** 3),
    ('MB', 1024 ** 2),
    ('KB', 1024),
    ('B', 1),
)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_file_size: str = "10MB",
    backup_count: int = 5
) -> logging.Logger:
    """
    Install root handlers: stderr always, plus a rotating file when asked.

    Args:
        log_level: Level name such as "DEBUG" or "WARNING"
        log_file: Optional log file path; parent directories are created
        max_file_size: Rotation threshold, e.g. "10MB"
        backup_count: Rotated files to keep

    Returns:
        The ``confladder`` package logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stdout is reserved for command output
    handlers = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=_parse_size(max_file_size),
            backupCount=backup_count,
            encoding='utf-8'
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    package_logger = logging.getLogger('confladder')
    package_logger.debug(f"Logging initialized - Level: {log_level}, File: {log_file}")
    return package_logger


def _parse_size(size_str: str) -> int:
    """
    Parse a size such as '512KB', '10MB' or '1.5GB' into bytes.

    A bare number is taken as bytes.
    """
    text = size_str.upper().strip()
    for suffix, factor in _SIZE_UNITS:
        if text.endswith(suffix):
            return int(float(text[:-len(suffix)]) * factor)
    return int(text)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
