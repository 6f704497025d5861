"""
Tests for environment-driven configuration.
"""

import pytest

from correlation_mining.config import Config

CASH_VARS = (
    "CASH_MINPTS",
    "CASH_MAXLEVEL",
    "CASH_MINDIM",
    "CASH_JITTER",
    "CASH_ADJUST",
    "CASH_MAX_HEAP_SIZE",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in CASH_VARS + ("LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    """Without environment variables the built-in defaults apply."""
    cfg = Config().cash_defaults()
    assert cfg.min_pts == Config.DEFAULT_MIN_PTS
    assert cfg.max_level == Config.DEFAULT_MAX_LEVEL
    assert cfg.min_dim == Config.DEFAULT_MIN_DIM
    assert cfg.jitter == Config.DEFAULT_JITTER
    assert cfg.adjust is False
    assert cfg.max_heap_size == 40000


def test_environment_values(clean_env):
    """CASH_* variables populate the configuration."""
    clean_env.setenv("CASH_MINPTS", "25")
    clean_env.setenv("CASH_MAXLEVEL", "6")
    clean_env.setenv("CASH_MINDIM", "2")
    clean_env.setenv("CASH_JITTER", "0.05")
    clean_env.setenv("CASH_ADJUST", "yes")
    clean_env.setenv("CASH_MAX_HEAP_SIZE", "1000")

    cfg = Config().cash_defaults()

    assert (cfg.min_pts, cfg.max_level, cfg.min_dim) == (25, 6, 2)
    assert cfg.jitter == pytest.approx(0.05)
    assert cfg.adjust is True
    assert cfg.max_heap_size == 1000


def test_overrides_win_and_none_is_ignored(clean_env):
    """Explicit keyword values override the environment; None does not."""
    clean_env.setenv("CASH_MINPTS", "25")
    cfg = Config().cash_defaults(min_pts=7, jitter=None)
    assert cfg.min_pts == 7
    assert cfg.jitter == Config.DEFAULT_JITTER


@pytest.mark.parametrize(
    "name, value, message",
    [
        ("CASH_MINPTS", "many", "CASH_MINPTS must be an integer"),
        ("CASH_JITTER", "wide", "CASH_JITTER must be a number"),
        ("CASH_ADJUST", "maybe", "CASH_ADJUST must be a boolean"),
        ("CASH_MAXLEVEL", "0", "max_level must be > 0"),
    ],
)
def test_invalid_environment(clean_env, name, value, message):
    """Unparseable or out-of-range values raise ValueError naming the problem."""
    clean_env.setenv(name, value)
    with pytest.raises(ValueError, match=message):
        Config().cash_defaults()


def test_logging_settings(clean_env):
    """Log level and file come from LOG_LEVEL / LOG_FILE."""
    assert Config().log_level == "INFO"
    assert Config().log_file is None

    clean_env.setenv("LOG_LEVEL", "DEBUG")
    clean_env.setenv("LOG_FILE", "run.log")
    config = Config()
    assert config.log_level == "DEBUG"
    assert config.log_file == "run.log"
