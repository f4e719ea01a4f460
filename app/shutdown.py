# =============================================================================
# app/shutdown.py - Graceful Shutdown
# =============================================================================
# Collects cleanup callbacks during startup and runs them, newest first,
# when the application shuts down. uvicorn drains in-flight requests for
# SHUTDOWN_TIMEOUT seconds before the lifespan shutdown runs.
# =============================================================================

import inspect
import logging
from typing import Any, Awaitable, Callable

from fastapi import FastAPI

from app.config import Settings

logger = logging.getLogger(__name__)

ShutdownCallback = Callable[[], Awaitable[Any] | Any]


class GracefulShutdown:
    """
    Ordered registry of shutdown callbacks.

    A failing callback is logged and the remaining ones still run.
    """

    def __init__(self, timeout: int = 10):
        self.timeout = timeout
        self._callbacks: list[tuple[str, ShutdownCallback]] = []

    def register(self, name: str, callback: ShutdownCallback) -> None:
        self._callbacks.append((name, callback))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._callbacks]

    async def run(self) -> list[str]:
        """
        Run every callback in reverse registration order.

        Returns:
            Names of the callbacks that failed
        """
        failed = []
        for name, callback in reversed(self._callbacks):
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
                logger.info(f"Shutdown step completed: {name}")
            except Exception as e:
                logger.error(f"Shutdown step failed: {name} - {e}")
                failed.append(name)

        self._callbacks.clear()
        return failed


def setup_graceful_shutdown(app: FastAPI, config: Settings) -> GracefulShutdown | None:
    """
    Attach a GracefulShutdown to the app unless running in local mode.

    In local mode the process is expected to exit immediately (e.g. on
    code reload), so nothing is drained.
    """
    if not config.graceful_shutdown_enabled:
        app.state.graceful_shutdown = None
        return None

    shutdown = GracefulShutdown(timeout=config.SHUTDOWN_TIMEOUT)
    app.state.graceful_shutdown = shutdown
    logger.info(f"Graceful shutdown enabled (timeout={config.SHUTDOWN_TIMEOUT}s)")
    return shutdown


def uvicorn_shutdown_timeout(config: Settings) -> int:
    """Seconds uvicorn waits for open connections before closing them."""
    return config.SHUTDOWN_TIMEOUT if config.graceful_shutdown_enabled else 0
