"""
Tests for logging configuration.
"""

import logging

import pytest

from correlation_mining.utils.logging_config import (
    PACKAGE_LOGGER_NAME,
    get_logger,
    setup_logging,
)


def test_setup_logging_sets_level(reset_logging):
    """The package logger takes the requested level."""
    logger = setup_logging("DEBUG")
    assert logger.name == PACKAGE_LOGGER_NAME
    assert logger.level == logging.DEBUG


def test_setup_logging_does_not_stack_handlers(reset_logging):
    """Repeated setup replaces handlers instead of adding more."""
    setup_logging("INFO")
    logger = setup_logging("WARNING")
    stream_handlers = [h for h in logger.handlers if type(h) is logging.StreamHandler]
    assert len(stream_handlers) == 1


def test_setup_logging_reads_environment(reset_logging, monkeypatch):
    """Without an explicit level LOG_LEVEL is used."""
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    assert setup_logging().level == logging.ERROR


def test_setup_logging_invalid_level(reset_logging):
    """Unknown level names are rejected."""
    with pytest.raises(ValueError, match="Invalid log level"):
        setup_logging("LOUD")


def test_log_file(reset_logging, tmp_path):
    """Records are written to the log file when one is given."""
    log_file = tmp_path / "logs" / "cash.log"
    setup_logging("INFO", log_file=log_file)
    get_logger("correlation_mining.tests").info("hello from the test")
    for handler in get_logger().handlers:
        handler.flush()
    assert "hello from the test" in log_file.read_text(encoding="utf-8")


def test_module_loggers_are_children():
    """Module loggers propagate to the package logger."""
    logger = get_logger("correlation_mining.algorithms.cash")
    assert logger.name.startswith(PACKAGE_LOGGER_NAME + ".")
    assert logger.propagate
