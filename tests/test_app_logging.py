"""Tests for logging configuration."""

import logging

from omad_tracker.app_logging import configure_logging


def test_configure_logging_installs_one_handler() -> None:
    logger = logging.getLogger("omad_tracker")
    logger.handlers.clear()

    configure_logging()
    configure_logging()

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False


def test_service_loggers_inherit_app_handler() -> None:
    configure_logging()

    child = logging.getLogger("omad_tracker.services.daily_logs")

    assert child.getEffectiveLevel() == logging.INFO
    assert not child.handlers
