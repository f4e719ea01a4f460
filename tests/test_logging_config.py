# =============================================================================
# tests/test_logging_config.py - Logging Setup Tests
# =============================================================================

import logging

import pytest

from app.config import settings
from app.logging_config import ConsoleFormatter, LOG_FORMAT, configure_logging


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("uvicorn.access").disabled = False
    configure_logging(settings)


class TestConfigureLogging:

    def test_local_is_debug_with_colour(self, make_settings):
        configure_logging(make_settings(ENVIRONMENT="local"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, ConsoleFormatter)

    def test_production_is_info(self, make_settings):
        configure_logging(make_settings(ENVIRONMENT="production"))

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert not isinstance(root.handlers[0].formatter, ConsoleFormatter)

    def test_app_logging_off_disables_access_log(self, make_settings):
        configure_logging(make_settings(ENVIRONMENT="production", APP_LOGGING=False))
        assert logging.getLogger("uvicorn.access").disabled

    def test_test_environment_silences_logging(self, make_settings):
        configure_logging(make_settings(ENVIRONMENT="test"))
        assert logging.getLogger("anything").isEnabledFor(logging.CRITICAL) is False


class TestConsoleFormatter:

    def test_colours_level_name_only_in_output(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "hello", None, None)

        output = ConsoleFormatter(LOG_FORMAT).format(record)

        assert "\x1b[33mWARNING\x1b[0m" in output
        assert record.levelname == "WARNING"
