"""
Logging Configuration Module

The library itself only creates module loggers (``logging.getLogger(__name__)``)
and never installs handlers on import. Applications and the CLI call
:func:`setup_logging` once to route those records somewhere.

Usage:
    from sliding_dft.logging_config import setup_logging, get_logger

    # Call once at startup
    setup_logging()

    # Get logger in any module
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

# Log format configurations
CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# File size limits
MAX_BYTES = 10 * 1024 * 1024  # 10 MB per log file
BACKUP_COUNT = 5

PACKAGE_LOGGER = 'sliding_dft'


def create_rotating_handler(filepath, level=logging.DEBUG, max_bytes=MAX_BYTES, backup_count=BACKUP_COUNT):
    """
    Create a rotating file handler.

    Args:
        filepath: Log file path; parent directories are created
        level: Logging level
        max_bytes: Maximum file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        RotatingFileHandler configured with formatter
    """
    directory = os.path.dirname(os.path.abspath(filepath))
    os.makedirs(directory, exist_ok=True)
    handler = RotatingFileHandler(
        filepath,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
    return handler


def create_console_handler(level=logging.INFO, stream=None):
    """Create a console handler (stderr by default, so stdout stays free for data)."""
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(console_level=logging.WARNING, log_file=None, file_level=logging.DEBUG):
    """
    Configure logging for the ``sliding_dft`` package logger.

    Sets up:
    - Console output (WARNING by default)
    - Optional rotating log file (DEBUG by default)

    Existing handlers on the package logger are replaced, so calling this twice
    does not duplicate output.

    Args:
        console_level: Logging level for console output
        log_file: Optional path of a rotating log file
        file_level: Logging level for the log file

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(min(console_level, file_level) if log_file else console_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    logger.addHandler(create_console_handler(console_level))
    if log_file:
        logger.addHandler(create_rotating_handler(log_file, file_level))

    logger.debug("Logging initialized (console=%s, file=%s)",
                 logging.getLevelName(console_level), log_file or '<none>')
    return logger


def get_logger(name):
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance
    """
    return logging.getLogger(name)


def set_log_level(level):
    """
    Dynamically change the console log level of the package logger.

    Args:
        level: New logging level (e.g., logging.DEBUG)
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)
    if level < logger.level or logger.level == logging.NOTSET:
        logger.setLevel(level)
