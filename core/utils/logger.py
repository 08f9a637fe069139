"""
Logging configuration for the application.
"""
import logging
import sys
from typing import Optional, Union

from config import get_settings


def setup_logger(
    name: str,
    level: Optional[Union[int, str]] = None,
    log_format: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger.

    Output goes to stderr so that command output on stdout stays clean.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (default: LOG_LEVEL setting)
        log_format: Custom log format string

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    if level is None:
        level = get_settings().log_level.upper()
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if log_format is None:
        log_format = (
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(handler)

    return logger


# Create a default logger for the application
app_logger = setup_logger('file_links')
