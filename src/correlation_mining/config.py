"""
Configuration management for Correlation Mining.

Loads configuration from environment variables (typically from a .env file).
Uses python-dotenv to load .env automatically.

Usage:
    from correlation_mining.config import config

    # Default CASH parameters for scripts
    cfg = config.cash_defaults()

    # Logging level
    level = config.log_level
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .algorithms.cash import CASHConfig, DEFAULT_MAX_HEAP_SIZE

# Look for .env in project root (parent of src/)
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


class Config:
    """
    Application configuration loaded from environment variables.

    Environment variables can be set:
    1. In a .env file in the project root
    2. In the system environment
    3. In a container/deployment environment
    """

    DEFAULT_MIN_PTS = 10
    DEFAULT_MAX_LEVEL = 8
    DEFAULT_MIN_DIM = 1
    DEFAULT_JITTER = 0.1

    def __init__(self):
        """Load configuration from environment."""
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.log_file: Optional[str] = os.getenv("LOG_FILE") or None

    def cash_defaults(self, **overrides) -> CASHConfig:
        """
        Build a CASHConfig from ``CASH_*`` environment variables.

        Keyword arguments that are not ``None`` override the environment.

        Raises:
            ValueError: If a variable cannot be parsed or a value is out of range
        """
        values = {
            "min_pts": _env_int("CASH_MINPTS", self.DEFAULT_MIN_PTS),
            "max_level": _env_int("CASH_MAXLEVEL", self.DEFAULT_MAX_LEVEL),
            "min_dim": _env_int("CASH_MINDIM", self.DEFAULT_MIN_DIM),
            "jitter": _env_float("CASH_JITTER", self.DEFAULT_JITTER),
            "adjust": _env_bool("CASH_ADJUST", False),
            "max_heap_size": _env_int("CASH_MAX_HEAP_SIZE", DEFAULT_MAX_HEAP_SIZE),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CASHConfig(**values)


# Global config instance
config = Config()
