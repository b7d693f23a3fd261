"""Tests for the logging setup."""

import logging

import pytest

from crosscors.my_logging import debug_log, setup_debug_logging, setup_event_logging


def test_debug_disabled_by_default(crosscors_logger):
    assert setup_debug_logging() is False
    assert crosscors_logger.level == logging.NOTSET


@pytest.mark.parametrize("value", ["true", "1", "YES"])
def test_debug_enabled_from_env(monkeypatch, crosscors_logger, value):
    monkeypatch.setenv("CROSSCORS_DEBUG", value)

    assert setup_debug_logging() is True
    assert setup_debug_logging() is True
    assert crosscors_logger.level == logging.DEBUG
    assert len([h for h in crosscors_logger.handlers if getattr(h, "_crosscors_stderr", False)]) == 1


def test_debug_log_includes_context(caplog):
    with caplog.at_level(logging.DEBUG, logger="crosscors"):
        debug_log("Matching origin", origin="https://a.test", method="GET")

    assert "Matching origin origin='https://a.test' method='GET'" in caplog.text


def test_event_logging_enables_info(crosscors_logger):
    setup_event_logging()
    setup_event_logging()

    assert crosscors_logger.level == logging.INFO
    assert len([h for h in crosscors_logger.handlers if getattr(h, "_crosscors_stderr", False)]) == 1


def test_event_logging_keeps_debug_level(monkeypatch, crosscors_logger):
    monkeypatch.setenv("CROSSCORS_DEBUG", "1")
    setup_debug_logging()

    setup_event_logging()

    assert crosscors_logger.level == logging.DEBUG
