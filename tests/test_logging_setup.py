"""Tests for the logging sink (infra/logging_setup.py)."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from cmdshell.exceptions import ConfigurationError
from cmdshell.infra.logging_setup import configure_logging


class TestConfigureLogging:
    def test_installs_single_rich_handler(self) -> None:
        configure_logging("INFO")
        logger = configure_logging("DEBUG")

        rich_handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_accepts_numeric_level(self) -> None:
        assert configure_logging(logging.ERROR).level == logging.ERROR

    def test_unknown_level(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown log level"):
            configure_logging("LOUD")
