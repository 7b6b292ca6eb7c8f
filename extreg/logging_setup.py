"""Logging configuration for the extension registry."""

import logging
import sys
from pathlib import Path

LOGGER_NAME = "extreg"

# Security events are routed through this child logger so they can be
# filtered or shipped separately from ordinary rejections.
SECURITY_LOGGER_NAME = "extreg.security"


def setup_logging(
    verbosity: int = 0,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the root ``extreg`` logger.

    Args:
        verbosity: -1 for quiet (WARNING+), 0 for normal (INFO), 1 for verbose (DEBUG)
        log_file: Optional path to write logs to file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    if verbosity < 0:
        console_handler.setLevel(logging.WARNING)
    elif verbosity > 0:
        console_handler.setLevel(logging.DEBUG)
    else:
        console_handler.setLevel(logging.INFO)

    if verbosity > 0:
        console_fmt = logging.Formatter("%(levelname)s [%(name)s]: %(message)s")
    else:
        console_fmt = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_fmt)
    logger.addHandler(console_handler)

    # File handler is always DEBUG, with timestamps
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_fmt = logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_fmt)
        logger.addHandler(file_handler)

    return logger


def verbosity_for_level(level: str) -> int:
    """Map a level name from settings to a ``setup_logging`` verbosity."""
    level = level.upper()
    if level == "DEBUG":
        return 1
    if level in ("WARNING", "ERROR", "CRITICAL"):
        return -1
    return 0


def get_security_logger() -> logging.Logger:
    """Get the logger used for security-relevant warnings."""
    return logging.getLogger(SECURITY_LOGGER_NAME)
