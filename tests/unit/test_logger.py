"""Tests for logger configuration."""

import logging

import pytest

from tracerelay.core.logger import configure_logger, get_log_level, set_log_level


@pytest.fixture(autouse=True)
def restore_level():
    yield
    set_log_level("info")


def test_configure_sets_level_and_prefix():
    logger = configure_logger(log_level="debug", prefix="Test")
    assert logger.name == "tracerelay"
    assert logger.level == logging.DEBUG
    assert get_log_level() == "debug"
    assert "[Test]" in logger.handlers[-1].formatter._fmt


def test_configure_twice_keeps_one_handler():
    configure_logger()
    configure_logger()
    assert len(logging.getLogger("tracerelay").handlers) == 1


def test_silent_suppresses_errors():
    set_log_level("silent")
    assert not logging.getLogger("tracerelay.core.reporter").isEnabledFor(logging.ERROR)


def test_invalid_level():
    with pytest.raises(ValueError):
        set_log_level("verbose")  # type: ignore[arg-type]
