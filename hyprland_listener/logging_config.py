"""Logging configuration for hyprland-listener.

Provides:
- Configurable log levels (WARNING, INFO, DEBUG), or LOG_LEVEL from the environment
- Colored level names on terminals
- Plain / verbose / debug formats
"""

import logging
import os
import sys
from typing import Optional, TextIO

LOGGER_NAME = "hyprland_listener"

# Default log format
DEFAULT_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        """Format log record with colors, leaving the record untouched for other handlers."""
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the package logger.

    Args:
        verbose: Enable verbose logging (INFO level)
        debug: Enable debug logging (DEBUG level)
        stream: Output stream (default: stderr)

    Returns:
        Configured logger instance

    Without flags the level comes from LOG_LEVEL (default WARNING).

    Examples:
        >>> logger = setup_logging(verbose=True)
        >>> logger.info("Listening")
        2026-01-05 10:30:45 [INFO] hyprland_listener: Listening
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Remove existing handlers
    logger.handlers.clear()

    if debug:
        level = logging.DEBUG
        log_format = DEBUG_FORMAT
    elif verbose:
        level = logging.INFO
        log_format = VERBOSE_FORMAT
    else:
        level = logging.getLevelName(os.environ.get("LOG_LEVEL", "WARNING").upper())
        if not isinstance(level, int):
            level = logging.WARNING
        log_format = VERBOSE_FORMAT if level < logging.WARNING else DEFAULT_FORMAT

    logger.setLevel(level)

    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)

    # Use colored formatter if terminal supports it
    if hasattr(stream, "isatty") and stream.isatty():
        formatter = ColoredFormatter(log_format)
    else:
        formatter = logging.Formatter(log_format)

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
