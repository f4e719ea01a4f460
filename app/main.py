# =============================================================================
# app/main.py - FastAPI Application Factory
# =============================================================================
# Builds the application for either process role:
#   main   - verification API, job dashboard, WebSockets (Redis-backed)
#   worker - health + job dashboard, plus an embedded Celery worker
#
# Usage:
#   poetry run uvicorn app.main:create_app --factory --reload
#   poetry run authgate            # picks the role and port from IS_WORKER
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.config import Settings, settings
from app.dashboard_auth import QUEUE_DASHBOARD_PATH
from app.exceptions import (
    AuthgateException,
    authgate_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.logging_config import configure_logging
from app.middleware import (
    QueueDashboardAuthMiddleware,
    SecurityHeadersMiddleware,
    UnhandledErrorMiddleware,
    request_logging_middleware,
)
from app.monitoring import SentryMiddleware, init_sentry
from app.routers import health, queues, verifications
from app.shutdown import setup_graceful_shutdown
from app.websocket import RedisWebSocketAdapter, websocket_manager
from app.websocket import routes as websocket_routes

logger = logging.getLogger(__name__)

API_VERSION = "v1"

CORS_METHODS = ["GET", "PATCH", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-Requested-With", "Accept"]

DESCRIPTION = """
## Authgate API

Backend for short-lived verification records (email / identity confirmation,
one-time tokens), with background jobs and real-time events.

### Surfaces

| Path | Purpose |
|------|---------|
| `/api/v1/verifications` | Create, inspect, check and delete verification records |
| `/api/v1/health` | Health, readiness and liveness |
| `/api/queues` | Job queue dashboard (separate login) |
| `/api/ws/{room}` | WebSocket room events |
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: create tables, start the Redis listener (main) or the
      embedded Celery worker (worker)
    - Shutdown: stop them again, gracefully unless running locally
    """
    from core.database import dispose_engine, init_db

    config: Settings = app.state.settings
    adapter: RedisWebSocketAdapter | None = app.state.websocket_adapter
    worker = app.state.embedded_worker
    shutdown = app.state.graceful_shutdown

    role = "worker" if app.state.is_worker else "main"
    logger.info(f"Starting {config.APP_NAME} ({role}) in {config.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {config.cors_origins_list}")

    init_db()

    if adapter is not None:
        await adapter.start()
    if worker is not None:
        worker.start()

    if shutdown is not None:
        # Runs in reverse: worker, then adapter, then database
        shutdown.register("database", dispose_engine)
        if adapter is not None:
            shutdown.register("websocket-adapter", adapter.stop)
        if worker is not None:
            shutdown.register("celery-worker", lambda: worker.stop(timeout=config.SHUTDOWN_TIMEOUT))

    yield

    logger.info(f"Shutting down {config.APP_NAME} ({role})")

    if shutdown is not None:
        await shutdown.run()
    else:
        if worker is not None:
            worker.stop(timeout=0)
        if adapter is not None:
            await adapter.stop()
        dispose_engine()


def create_app(config: Settings | None = None, is_worker: bool | None = None) -> FastAPI:
    """
    FastAPI application factory.

    Registration order: cookies, /api prefix, validation, URI versioning,
    CORS, security headers, response serialization, docs, Sentry, graceful
    shutdown, WebSocket adapter (main only), queue dashboard auth gate.

    Args:
        config: Settings to use (defaults to the global settings)
        is_worker: Override the IS_WORKER flag

    Returns:
        Configured FastAPI application instance
    """
    config = config or settings
    is_worker = config.IS_WORKER if is_worker is None else is_worker
    prefix = config.API_PREFIX.rstrip("/")

    configure_logging(config)

    # Docs are served under the global prefix
    app = FastAPI(
        title=config.APP_NAME,
        description=DESCRIPTION,
        version=__version__,
        docs_url=f"{prefix}/docs",
        redoc_url=f"{prefix}/redoc",
        openapi_url=f"{prefix}/openapi.json",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Verifications", "description": "Verification record management"},
            {"name": "Queues", "description": "Job queue dashboard (separate authentication)"},
            {"name": "Health", "description": "API health and readiness checks"},
            {"name": "WebSocket", "description": "Real-time room events"},
        ],
    )
    app.state.settings = config
    app.state.is_worker = is_worker

    # Signed cookies are keyed by AUTH_SECRET (see lib.cookies)
    app.state.cookie_secret = config.AUTH_SECRET

    # -------------------------------------------------------------------------
    # Validation and error handlers
    # -------------------------------------------------------------------------

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(AuthgateException, authgate_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # -------------------------------------------------------------------------
    # Routers (URI versioned under the global prefix)
    # -------------------------------------------------------------------------

    versioned = f"{prefix}/{API_VERSION}"

    app.include_router(health.router, prefix=versioned, tags=["Health"])

    if not is_worker:
        app.include_router(
            verifications.router,
            prefix=f"{versioned}/verifications",
            tags=["Verifications"],
        )

    dashboard_prefix = f"{prefix}{QUEUE_DASHBOARD_PATH}"
    app.include_router(queues.router, prefix=dashboard_prefix, tags=["Queues"])

    # -------------------------------------------------------------------------
    # Middleware (last added runs first)
    # -------------------------------------------------------------------------

    app.add_middleware(QueueDashboardAuthMiddleware, config=config, path_prefix=dashboard_prefix)

    if init_sentry(config):
        app.add_middleware(SentryMiddleware)

    # Reports are sent by SentryMiddleware before the error becomes a 500 here
    app.add_middleware(UnhandledErrorMiddleware)

    if config.APP_LOGGING:
        app.middleware("http")(request_logging_middleware)

    app.add_middleware(SecurityHeadersMiddleware, docs_prefix=f"{prefix}/docs", hsts=config.IS_HTTPS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    # -------------------------------------------------------------------------
    # Process lifecycle
    # -------------------------------------------------------------------------

    setup_graceful_shutdown(app, config)

    app.state.websocket_adapter = None
    app.state.embedded_worker = None

    if not is_worker:
        app.state.websocket_adapter = RedisWebSocketAdapter(config.REDIS_URL, websocket_manager)
        app.include_router(websocket_routes.router, prefix=prefix, tags=["WebSocket"])
    else:
        from workers.embedded import EmbeddedWorker

        app.state.embedded_worker = EmbeddedWorker(concurrency=config.WORKER_CONCURRENCY)

    logger.info(f"Application created ({'worker' if is_worker else 'main'} mode)")

    return app

