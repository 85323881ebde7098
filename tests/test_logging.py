"""Tests for logging configuration."""

import logging
import os
from unittest.mock import patch

import structlog

from nested_auth.logging import configure_logging, get_log_level


def test_get_log_level_default() -> None:
    """Test INFO is the default log level."""
    with patch.dict(os.environ, {}, clear=True):
        assert get_log_level() == logging.INFO


def test_get_log_level_from_environment() -> None:
    """Test LOG_LEVEL is case insensitive."""
    with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
        assert get_log_level() == logging.DEBUG


def test_get_log_level_explicit_overrides_environment() -> None:
    """Test an explicit level wins over LOG_LEVEL."""
    with patch.dict(os.environ, {"LOG_LEVEL": "ERROR"}):
        assert get_log_level("debug") == logging.DEBUG


def test_get_log_level_invalid_defaults_to_info() -> None:
    """Test unknown levels fall back to INFO."""
    with patch.dict(os.environ, {"LOG_LEVEL": "chatty"}):
        assert get_log_level() == logging.INFO


def test_configure_logging() -> None:
    """Test root logger and structlog are configured."""
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    try:
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            configure_logging()

        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        assert isinstance(
            root_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter
        )
        assert structlog.is_configured()
    finally:
        structlog.reset_defaults()
        root_logger.handlers[:] = saved_handlers
        root_logger.setLevel(saved_level)
