"""Tests for logging setup."""

import logging
from pathlib import Path

import pytest

from memgrid.core.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("memgrid")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_repeated_setup_does_not_duplicate_handlers(tmp_path: Path):
    setup_logging(log_file=tmp_path / "a.log")
    logger = setup_logging(log_file=tmp_path / "a.log")
    assert len(logger.handlers) == 2


def test_file_only_logging(tmp_path: Path):
    log_file = tmp_path / "logs" / "memgrid.log"
    logger = setup_logging(log_file=log_file, console=False)
    assert len(logger.handlers) == 1

    get_logger("test").info("hello grid")
    logger.handlers[0].flush()
    assert "memgrid.test | hello grid" in log_file.read_text()


def test_http_client_logging_quiet_unless_debug():
    setup_logging(level=logging.INFO, console=False)
    assert logging.getLogger("httpx").level == logging.WARNING

    setup_logging(level=logging.DEBUG, console=False)
    assert logging.getLogger("httpx").level == logging.DEBUG
