# =============================================================================
# app/monitoring.py - Error Monitoring (Sentry)
# =============================================================================
# Initializes sentry-sdk and forwards unhandled request errors to it.
#
# Usage:
#   from app.monitoring import init_sentry, SentryMiddleware
#
#   init_sentry(settings)
#   app.add_middleware(SentryMiddleware)
# =============================================================================

import logging

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from app.config import Settings

logger = logging.getLogger(__name__)

_sentry_enabled = False


def init_sentry(config: Settings) -> bool:
    """
    Initialize Sentry when a DSN is configured.

    Args:
        config: Application settings

    Returns:
        bool: True if Sentry was initialized
    """
    global _sentry_enabled

    if not config.SENTRY_DSN:
        logger.info("SENTRY_DSN not set, error monitoring disabled")
        _sentry_enabled = False
        return False

    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        traces_sample_rate=1.0,
        environment=config.ENVIRONMENT,
    )
    _sentry_enabled = True
    logger.info(f"Sentry initialized for environment: {config.ENVIRONMENT}")
    return True


def capture_exception(exc: BaseException) -> None:
    """Send an exception to Sentry. No-op when Sentry is disabled."""
    if _sentry_enabled:
        sentry_sdk.capture_exception(exc)


class SentryMiddleware:
    """
    ASGI middleware that reports every exception escaping a request to Sentry.

    The exception is re-raised so the regular exception handlers still
    produce the response.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            capture_exception(exc)
            raise
