"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler

from crossmodel.utils.logger import resolve_level, setup_logger


class TestSetupLogger:
    def teardown_method(self):
        logger = logging.getLogger("crossmodel.test")
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def test_console_only(self):
        logger = setup_logger("crossmodel.test", log_level="warning")

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)

    def test_file_handler_records_debug(self, tmp_path):
        log_file = tmp_path / "logs" / "crossmodel.log"
        logger = setup_logger("crossmodel.test", log_file=str(log_file), log_level="WARNING")

        logging.getLogger("crossmodel.test.engine").debug("compared 3 pairs")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "compared 3 pairs" in log_file.read_text(encoding="utf-8")

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logger("crossmodel.test", log_level="INFO")
        logger = setup_logger("crossmodel.test", log_level="INFO")
        assert len(logger.handlers) == 1


class TestResolveLevel:
    def test_known_levels(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" Error ") == logging.ERROR

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            resolve_level("chatty")
