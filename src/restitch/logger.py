"""
Centralized Logging for Restitch

This module provides a configured logger with:
- Clean console output for user-facing progress messages
- Optional file logging for debugging
- Configurable log levels via LOG_LEVEL environment variable

Usage:
    from restitch.logger import logger

    logger.info("Exporting sequence...")
    logger.debug("Staged input0.mp4")

    # Progress helpers:
    log_step("Generating sequences")
    log_success("Archive written")
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional


# =============================================================================
# Log Level Configuration
# =============================================================================
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level() -> int:
    """Get log level from environment variable."""
    level_str = os.environ.get("LOG_LEVEL", "INFO").upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


# =============================================================================
# Formatters
# =============================================================================
class RestitchFormatter(logging.Formatter):
    """
    Console formatter.

    INFO messages are printed as-is; everything else carries a timestamp
    and level tag.
    """

    FORMATS = {
        logging.DEBUG: "%(asctime)s [DEBUG] %(name)s: %(message)s",
        logging.INFO: "%(message)s",
        logging.WARNING: "%(asctime)s [WARN] %(message)s",
        logging.ERROR: "%(asctime)s [ERROR] %(message)s",
        logging.CRITICAL: "%(asctime)s [CRITICAL] %(message)s",
    }

    def __init__(self):
        super().__init__(datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_fmt = self.FORMATS.get(record.levelno, self.FORMATS[logging.INFO])
        formatter = logging.Formatter(log_fmt, datefmt="%H:%M:%S")
        return formatter.format(record)


class FileFormatter(logging.Formatter):
    """Detailed formatter for file logging."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


# =============================================================================
# Logger Setup
# =============================================================================
def setup_logger(
    name: str = "restitch",
    log_file: Optional[Path] = None,
    level: Optional[int] = None
) -> logging.Logger:
    """
    Create and configure a logger instance.

    Args:
        name: Logger name (default: restitch)
        log_file: Optional path to log file
        level: Log level (default: from LOG_LEVEL env var)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    log_level = level or get_log_level()
    logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(RestitchFormatter())
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_handler.setFormatter(FileFormatter())
        logger.addHandler(file_handler)

    return logger


def configure_file_logging(log_file: Path) -> None:
    """Attach a debug-level file handler to the package logger (once per path)."""
    package_logger = logging.getLogger("restitch")
    target = os.path.abspath(log_file)
    for handler in package_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return

    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(FileFormatter())
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(file_handler)


# =============================================================================
# Global Logger Instance
# =============================================================================
logger = setup_logger()


# =============================================================================
# Convenience Functions
# =============================================================================
def log_step(step: str, marker: str = "▶") -> None:
    """Log a processing step."""
    logger.info(f"{marker} {step}")


def log_success(message: str) -> None:
    """Log a success message with checkmark."""
    logger.info(f"   ✅ {message}")


def log_error(message: str) -> None:
    """Log an error message with X mark."""
    logger.error(f"   ❌ {message}")


def log_warning(message: str) -> None:
    """Log a warning message."""
    logger.warning(f"   ⚠️  {message}")
