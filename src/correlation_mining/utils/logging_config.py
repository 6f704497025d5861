"""
Logging configuration for Correlation Mining.

All modules obtain their logger through ``get_logger(__name__)`` so that a
single ``setup_logging()`` call (typically from a script entry point)
controls verbosity for the whole package.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER_NAME = "correlation_mining"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    """Turn a level name / number (or LOG_LEVEL from the environment) into an int."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Invalid log level: {level}")
    return numeric


def setup_logging(
    level: Optional[Union[str, int]] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Handlers are attached to the ``correlation_mining`` logger only, so
    calling this repeatedly replaces the previous handlers instead of
    stacking duplicates.

    Args:
        level: Level name or number. Defaults to ``LOG_LEVEL`` env var, then INFO.
        log_file: Optional path; when given, records are also written there.

    Returns:
        The configured package logger.

    Raises:
        ValueError: If the level name is unknown
    """
    numeric_level = _resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(numeric_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger for the specified module."""
    return logging.getLogger(name if name else PACKAGE_LOGGER_NAME)
