"""Tests for logging configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from state_sync.logging import configure_logging

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _restore_logger():
    logger = logging.getLogger("state_sync")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)


def test_configure_logging_sets_level() -> None:
    """The package logger takes the configured level."""
    configure_logging("debug")
    assert logging.getLogger("state_sync").level == logging.DEBUG


def test_configure_logging_replaces_own_handlers() -> None:
    """Repeated calls do not stack handlers."""
    configure_logging("INFO")
    configure_logging("INFO")
    assert len(logging.getLogger("state_sync").handlers) == 1


def test_configure_logging_keeps_foreign_handlers() -> None:
    """Handlers installed by the host application are left alone."""
    logger = logging.getLogger("state_sync")
    foreign = logging.NullHandler()
    logger.addHandler(foreign)

    configure_logging("INFO")
    configure_logging("INFO")

    assert foreign in logger.handlers
    assert len(logger.handlers) == 2


def test_configure_logging_writes_log_file(tmp_path: Path) -> None:
    """An optional log file receives package log records."""
    log_file = tmp_path / "sync.log"
    configure_logging("INFO", log_file=str(log_file))

    logging.getLogger("state_sync.sync.engine").info("Revision sync started — topic=%s", "t")
    for handler in logging.getLogger("state_sync").handlers:
        handler.flush()

    assert "Revision sync started — topic=t" in log_file.read_text(encoding="utf-8")
