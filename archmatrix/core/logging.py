"""
Logging configuration for archmatrix.
"""

import logging
import os
import sys
from typing import Optional
from pathlib import Path


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[94m',      # Blue
        'WARNING': '\033[93m',   # Yellow
        'ERROR': '\033[91m',     # Red
        'CRITICAL': '\033[95m',  # Magenta
        'RESET': '\033[0m',
        'BOLD': '\033[1m',
    }

    def format(self, record):
        """Format log record with colors."""
        levelname = record.levelname
        record = logging.makeLogRecord(record.__dict__)
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        if levelname in ('ERROR', 'CRITICAL'):
            record.msg = f"{self.COLORS['BOLD']}{record.msg}{self.COLORS['RESET']}"
        return super().format(record)


def _use_color(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def verbosity_to_level(verbosity: int) -> int:
    """Map CLI verbosity (0=minimal, 1=progress, 2=commands, 3=debug) to a logging level."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity <= 2:
        return logging.INFO
    return logging.DEBUG


def setup_logger(
    name: str = "archmatrix",
    level: Optional[int] = None,
    log_file: Optional[Path] = None,
    verbosity: int = 0
) -> logging.Logger:
    """
    Set up the archmatrix logger.

    Args:
        name: Logger name
        level: Logging level (overrides verbosity if provided)
        log_file: Optional log file path
        verbosity: Verbosity level (0=minimal, 1=progress, 2=commands, 3=debug)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()

    if level is None:
        level = verbosity_to_level(verbosity)
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logger.level)

    console_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    if _use_color(sys.stdout):
        console_handler.setFormatter(ColoredFormatter(console_format))
    else:
        console_handler.setFormatter(logging.Formatter(console_format))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(console_format))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "archmatrix") -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
