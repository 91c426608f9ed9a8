# purchase_sdk/tests/test_config.py
import logging

import pytest
from pydantic import ValidationError

from purchase_sdk.config import Settings, settings
from purchase_sdk.logging_config import SDK_LOGGER_NAME, setup_sdk_logging


def test_defaults():
    s = Settings(_env_file=None)
    assert s.DEFAULT_PAGE_SIZE >= 1
    assert s.PAGINATION_MODE in ("server", "client")
    assert s.filter_debounce_seconds == s.FILTER_DEBOUNCE_MS / 1000.0


def test_vat_rates_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_VAT_RATES", "5, 20")
    monkeypatch.setenv("FILTER_DEBOUNCE_MS", "250")
    s = Settings(_env_file=None)
    assert s.ALLOWED_VAT_RATES == [5, 20]
    assert s.filter_debounce_seconds == 0.25


def test_pagination_mode_is_normalized():
    assert Settings(_env_file=None, PAGINATION_MODE=" Client ").PAGINATION_MODE == "client"
    with pytest.raises(ValidationError):
        Settings(_env_file=None, PAGINATION_MODE="cursor")


def test_setup_sdk_logging_is_idempotent():
    logger = logging.getLogger(SDK_LOGGER_NAME)
    saved_handlers, saved_level = list(logger.handlers), logger.level
    logger.handlers.clear()
    try:
        configured = setup_sdk_logging("debug")
        assert configured is logger
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

        setup_sdk_logging(logging.ERROR)
        assert len(logger.handlers) == 1
        child = logging.getLogger("purchase_sdk.controllers.order_list")
        ancestors = []
        while child.parent is not None:
            child = child.parent
            ancestors.append(child)
        assert logger in ancestors
    finally:
        logger.handlers[:] = saved_handlers
        logger.setLevel(saved_level)


def test_setup_sdk_logging_defaults_to_configured_level(monkeypatch):
    logger = logging.getLogger(SDK_LOGGER_NAME)
    saved_handlers, saved_level = list(logger.handlers), logger.level
    logger.handlers.clear()
    monkeypatch.setattr(settings, "LOGGING_LEVEL", "WARNING")
    try:
        setup_sdk_logging()
        assert logger.level == logging.WARNING
        assert logger.handlers[0].level == logging.WARNING
    finally:
        logger.handlers[:] = saved_handlers
        logger.setLevel(saved_level)
