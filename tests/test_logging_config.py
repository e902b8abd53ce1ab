"""Tests for command-line logging setup."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from logging_config import APP_LOGGERS, setup_logging


@pytest.fixture()
def restore_loggers() -> Iterator[None]:
    yield
    for name in APP_LOGGERS:
        app_logger = logging.getLogger(name)
        for handler in app_logger.handlers:
            handler.close()
        app_logger.handlers.clear()
        app_logger.setLevel(logging.NOTSET)
        app_logger.propagate = True


def test_setup_logging_writes_debug_to_file(tmp_path: Path, restore_loggers: None) -> None:
    log_file = tmp_path / "logs" / "ladder.log"
    setup_logging(debug=True, log_file=log_file)

    logging.getLogger("domain.state").debug("replayed %d events", 3)
    for handler in logging.getLogger("domain").handlers:
        handler.flush()

    assert logging.getLogger("domain").level == logging.DEBUG
    assert "replayed 3 events" in log_file.read_text()


def test_setup_logging_is_idempotent(restore_loggers: None) -> None:
    setup_logging()
    setup_logging()
    assert len(logging.getLogger("repositories").handlers) == 1
    assert logging.getLogger("repositories").level == logging.INFO
