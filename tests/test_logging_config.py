"""Tests for the root logger setup."""

import logging

import pytest

from trip_catalog_api.app.core.logging_config import (
    CONSOLE_HANDLER_NAME,
    FILE_HANDLER_NAME,
    setup_logging,
)


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def named(root, name):
    return [handler for handler in root.handlers if handler.get_name() == name]


def test_installs_handlers_once(root_logger, tmp_path):
    logfile = tmp_path / "logs" / "catalog.log"
    setup_logging("debug", str(logfile))
    setup_logging("debug", str(logfile))

    assert len(named(root_logger, FILE_HANDLER_NAME)) == 1
    assert len(named(root_logger, CONSOLE_HANDLER_NAME)) == 1
    assert root_logger.level == logging.DEBUG

    logging.getLogger("trip_catalog_api.test").info("Cache SET: all_trips")
    named(root_logger, FILE_HANDLER_NAME)[0].flush()
    assert "[INFO] trip_catalog_api.test: Cache SET: all_trips" in logfile.read_text(encoding="utf-8")


def test_unknown_level_falls_back_to_info(root_logger):
    setup_logging("chatty")
    assert root_logger.level == logging.INFO
