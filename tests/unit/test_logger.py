"""Tests for logger setup."""

import logging
import logging.handlers

import pytest

from umuturage.core.logger import setup_logger


@pytest.fixture
def logger_name(request):
    name = f"umuturage.test.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestSetupLogger:

    def test_console_only_by_default(self, logger_name):
        logger = setup_logger(logger_name, level="debug")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_rotating_file_handler(self, logger_name, tmp_path):
        logger = setup_logger(logger_name, log_dir=str(tmp_path / "logs"))
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1

        logger.info("Household submitted")
        file_handlers[0].flush()
        content = (tmp_path / "logs" / f"{logger_name}.log").read_text()
        assert "[INFO]" in content
        assert f"[{logger_name}]" in content
        assert "Household submitted" in content

    def test_no_duplicate_handlers(self, logger_name):
        setup_logger(logger_name)
        logger = setup_logger(logger_name, level="WARNING")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_invalid_level(self, logger_name):
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logger(logger_name, level="LOUD")
