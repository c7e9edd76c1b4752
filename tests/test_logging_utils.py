"""Tests for weaver/logging_utils.py"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from weaver.logging_utils import ROOT_LOGGER, configure_logging, resolve_level


@pytest.fixture
def weaver_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    saved_handlers, saved_level = list(logger.handlers), logger.level
    logger.handlers = []
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


def test_resolve_level():
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(logging.WARNING) == logging.WARNING
    assert resolve_level("chatty") == logging.INFO


def test_console_handler_installed_once(weaver_logger):
    first = configure_logging("INFO")
    second = configure_logging("DEBUG")
    assert len(first) == 1
    assert second == []
    assert len(weaver_logger.handlers) == 1
    assert weaver_logger.level == logging.DEBUG


def test_rotating_files(weaver_logger, tmp_path):
    configure_logging("INFO", log_dir=tmp_path / "logs")
    configure_logging("INFO", log_dir=tmp_path / "logs")
    rotating = [h for h in weaver_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert sorted(h.level for h in rotating) == [logging.INFO, logging.ERROR]

    logging.getLogger("weaver.operations").info("issued config")
    logging.getLogger("weaver.operations").error("start failed")
    for handler in rotating:
        handler.flush()

    general = (tmp_path / "logs" / "weaver.log").read_text()
    errors = (tmp_path / "logs" / "weaver_errors.log").read_text()
    assert "issued config" in general and "start failed" in general
    assert "start failed" in errors
    assert "issued config" not in errors
