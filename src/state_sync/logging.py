"""Logging setup for processes embedding state-sync."""

from __future__ import annotations

import logging

_LOGGER_NAME = "state_sync"
_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", *, log_file: str | None = None) -> None:
    """Attach stream (and optional file) handlers to the ``state_sync`` logger.

    Calling this again replaces the handlers installed by the previous call.
    The library itself never configures logging on import.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level.upper())

    for handler in [h for h in logger.handlers if getattr(h, "_state_sync", False)]:
        logger.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(_LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._state_sync = True  # type: ignore[attr-defined]  # noqa: SLF001
        logger.addHandler(handler)
