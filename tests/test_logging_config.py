"""Tests for logging setup."""

import logging

import pytest

from keycalc_pkg import config
from keycalc_pkg.logging_config import get_logger, setup_logging


@pytest.fixture
def keycalc_logger():
    logger = logging.getLogger("keycalc")
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


class TestSetupLogging:
    def test_explicit_level(self, keycalc_logger):
        setup_logging(level="debug")
        assert keycalc_logger.level == logging.DEBUG
        assert len(keycalc_logger.handlers) == 1

    def test_level_from_config(self, keycalc_logger, monkeypatch):
        monkeypatch.setattr(config, "LOG_LEVEL", "ERROR")
        setup_logging()
        assert keycalc_logger.level == logging.ERROR

    def test_unknown_level_falls_back_to_warning(self, keycalc_logger):
        setup_logging(level="LOUD")
        assert keycalc_logger.level == logging.WARNING

    def test_repeated_setup_does_not_stack_handlers(self, keycalc_logger):
        setup_logging()
        setup_logging()
        assert len(keycalc_logger.handlers) == 1

    def test_log_file_from_config(self, keycalc_logger, monkeypatch, tmp_path):
        log_file = tmp_path / "keycalc.log"
        monkeypatch.setattr(config, "LOG_FILE", str(log_file))
        setup_logging(level="INFO")
        get_logger("history").warning("disk full")
        for handler in keycalc_logger.handlers:
            handler.flush()
        line = log_file.read_text(encoding="utf-8").strip()
        assert line.endswith("[WARNING] keycalc.history: disk full")


def test_get_logger_is_namespaced():
    assert get_logger("engine").name == "keycalc.engine"
    assert get_logger("engine").parent is logging.getLogger("keycalc")
