"""
Tests for the logging helpers.
"""

import logging

import pytest

from restclient.logging_utils import (
    LOGGER_NAME,
    SensitiveHeaderFilter,
    configure_logging,
    debug_enabled,
    get_logger,
)


@pytest.fixture
def package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def _record(args) -> logging.LogRecord:
    return logging.LogRecord(LOGGER_NAME, logging.DEBUG, __file__, 1, "request headers: %s", (args,), None)


class TestSensitiveHeaderFilter:
    def test_redacts_credentials(self):
        record = _record({"Authorization": "Bearer abc", "Accept": "*/*", "cookie": "s=1"})
        SensitiveHeaderFilter().filter(record)

        assert record.args == {"Authorization": "[redacted]", "Accept": "*/*", "cookie": "[redacted]"}
        assert "Bearer" not in record.getMessage()

    def test_non_mapping_args_untouched(self):
        record = logging.LogRecord(LOGGER_NAME, logging.DEBUG, __file__, 1, "%s %s", ("GET", "/x"), None)
        assert SensitiveHeaderFilter().filter(record) is True
        assert record.args == ("GET", "/x")


class TestConfigureLogging:
    def test_get_logger(self):
        assert get_logger().name == "restclient"
        assert get_logger("client").name == "restclient.client"

    def test_debug_env(self, monkeypatch):
        monkeypatch.setenv("DEBUG", "1")
        assert debug_enabled()
        monkeypatch.setenv("DEBUG", "0")
        assert not debug_enabled()

    def test_level_from_env(self, monkeypatch, package_logger):
        monkeypatch.setenv("DEBUG", "true")
        assert configure_logging().level == logging.DEBUG

        monkeypatch.delenv("DEBUG")
        assert configure_logging().level == logging.INFO

    def test_idempotent(self, package_logger):
        configure_logging(logging.WARNING)
        configure_logging(logging.DEBUG)

        marked = [h for h in package_logger.handlers if getattr(h, "_restclient", False)]
        assert len(marked) == 1
        assert package_logger.level == logging.DEBUG
