# =============================================================================
# app/logging_config.py - Logging Setup
# =============================================================================
# Configures standard library logging per environment:
#   local / development -> colourised console output at DEBUG
#   staging / production -> plain INFO output
#   test                 -> application logging disabled
#
# Usage:
#   from app.logging_config import configure_logging
#   configure_logging(settings)
# =============================================================================

import logging
import sys

from app.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ANSI colours for console level names
_LEVEL_COLOURS = {
    logging.DEBUG: "\x1b[36m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[41m",
}
_RESET = "\x1b[0m"


class ConsoleFormatter(logging.Formatter):
    """Formatter that colourises the level name for terminal output."""

    def format(self, record: logging.LogRecord) -> str:
        colour = _LEVEL_COLOURS.get(record.levelno)
        if not colour:
            return super().format(record)

        original = record.levelname
        record.levelname = f"{colour}{original}{_RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ConsoleFormatter(LOG_FORMAT))
    return handler


def configure_logging(config: Settings) -> None:
    """
    Configure the root logger for the current environment.

    Args:
        config: Application settings (ENVIRONMENT and APP_LOGGING are used)
    """
    root = logging.getLogger()

    if config.ENVIRONMENT == "test":
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)

    if config.ENVIRONMENT in ("local", "development"):
        level = logging.DEBUG
        handler = console_handler()
    else:
        level = logging.INFO
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # Chatty third-party loggers stay at INFO even in development
    for name in ("sqlalchemy.engine", "celery", "kombu", "redis"):
        logging.getLogger(name).setLevel(logging.INFO if level == logging.DEBUG else logging.WARNING)

    logging.getLogger("uvicorn.access").disabled = not config.APP_LOGGING
