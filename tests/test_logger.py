"""Tests for logger setup."""

import logging

import pytest

from institution_aggregator.logger import ROOT_LOGGER_NAME, get_module_logger, setup_logger


@pytest.fixture
def logger_name():
    name = "institution_aggregator_test"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_repeated_setup_relevels_without_new_handlers(logger_name):
    logger = setup_logger(logger_name, level=logging.INFO)
    setup_logger(logger_name, level=logging.DEBUG)

    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG
    assert logger.handlers[0].level == logging.DEBUG


def test_log_file_added_once(logger_name, tmp_path):
    log_file = tmp_path / "aggregator.log"

    setup_logger(logger_name, log_file=str(log_file))
    logger = setup_logger(logger_name, log_file=str(log_file))
    logger.info("fetched 3 sources")
    for handler in logger.handlers:
        handler.flush()

    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert "fetched 3 sources" in log_file.read_text()


def test_module_logger_is_package_child():
    assert get_module_logger("merge").name == f"{ROOT_LOGGER_NAME}.merge"
    assert get_module_logger("merge").parent is logging.getLogger(ROOT_LOGGER_NAME)
