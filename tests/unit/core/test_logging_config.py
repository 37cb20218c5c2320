"""Unit tests for logging setup."""

import logging

import pytest

from visualization_advisor.core.logging_config import PACKAGE_LOGGER, get_logger, setup_logging


@pytest.fixture
def restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


@pytest.mark.unit
@pytest.mark.usefixtures("restore_package_logger")
class TestSetupLogging:

    def test_level_name(self):
        logger = setup_logging("debug")
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(logging.INFO)
        logger = setup_logging(logging.INFO)
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "advisor.log"
        setup_logging(logging.INFO, log_file=str(log_file))

        get_logger("ingestion").info("ingested 3 rows")
        for handler in logging.getLogger(PACKAGE_LOGGER).handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "visualization_advisor.ingestion - INFO - ingested 3 rows" in text


@pytest.mark.unit
def test_get_logger_namespacing():
    assert get_logger("profiler").name == "visualization_advisor.profiler"
    assert get_logger("visualization_advisor.loaders").name == "visualization_advisor.loaders"
