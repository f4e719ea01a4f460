# =============================================================================
# app/middleware.py - HTTP Middleware
# =============================================================================
# - SecurityHeadersMiddleware: helmet-style response headers
# - QueueDashboardAuthMiddleware: gate for every request under /api/queues
# - UnhandledErrorMiddleware: generic 500 inside CORS and security headers
# - request_logging_middleware: method, path, status and duration per request
# =============================================================================

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.config import Settings
from app.dashboard_auth import DASHBOARD_COOKIE, authenticate_dashboard_request
from app.exceptions import (
    QueueDashboardAuthError,
    authgate_exception_handler,
    unhandled_exception_handler,
)
from lib.cookies import set_signed_cookie

logger = logging.getLogger(__name__)

DEFAULT_CSP = (
    "default-src 'self'; base-uri 'self'; font-src 'self' https: data:; "
    "form-action 'self'; frame-ancestors 'self'; img-src 'self' data:; "
    "object-src 'none'; script-src 'self'; script-src-attr 'none'; "
    "style-src 'self' https: 'unsafe-inline'; upgrade-insecure-requests"
)

# Swagger UI / ReDoc load their bundles from jsDelivr and run an inline bootstrap script
DOCS_CSP = (
    "default-src 'self'; img-src 'self' data: https://fastapi.tiangolo.com; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "worker-src 'self' blob:; object-src 'none'; frame-ancestors 'self'"
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to every response.

    Args:
        docs_prefix: Path prefix of the API documentation pages
        hsts: Also send Strict-Transport-Security (only meaningful over HTTPS)
    """

    def __init__(self, app: ASGIApp, docs_prefix: str = "/api/docs", hsts: bool = False):
        super().__init__(app)
        self.docs_prefix = docs_prefix
        self.hsts = hsts

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        is_docs = request.url.path.startswith(self.docs_prefix) or request.url.path.endswith("/redoc")
        response.headers["Content-Security-Policy"] = DOCS_CSP if is_docs else DEFAULT_CSP
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
        response.headers["Cross-Origin-Resource-Policy"] = "same-origin"
        response.headers["Origin-Agent-Cluster"] = "?1"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-DNS-Prefetch-Control"] = "off"
        response.headers["X-Download-Options"] = "noopen"
        response.headers["X-Frame-Options"] = "SAMEORIGIN"
        response.headers["X-Permitted-Cross-Domain-Policies"] = "none"
        response.headers["X-XSS-Protection"] = "0"
        if self.hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """
    Turn exceptions that escape the routes into the generic 500 response.

    Sits inside CORSMiddleware and SecurityHeadersMiddleware so error
    responses carry the same headers as any other response.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await unhandled_exception_handler(request, exc)


class QueueDashboardAuthMiddleware(BaseHTTPMiddleware):
    """
    Authenticate every request whose path starts with `path_prefix`.

    Unauthenticated requests never reach the dashboard routes.
    """

    def __init__(self, app: ASGIApp, config: Settings, path_prefix: str):
        super().__init__(app)
        self.config = config
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        try:
            result = authenticate_dashboard_request(request, self.config)
        except QueueDashboardAuthError as exc:
            return await authgate_exception_handler(request, exc)

        response = await call_next(request)

        if result.issue_cookie:
            set_signed_cookie(
                response,
                DASHBOARD_COOKIE,
                result.username,
                secret=self.config.AUTH_SECRET,
                max_age=self.config.QUEUE_DASHBOARD_SESSION_TTL,
                path=self.path_prefix,
                secure=self.config.IS_HTTPS,
            )
        return response


async def request_logging_middleware(request: Request, call_next):
    """
    Log each request with method, path, status code and duration.

    Logging Format:
        INFO: "Request completed: GET /api/v1/health - 200 - 0.003s"
    """
    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"Request completed: {request.method} {request.url.path} - "
        f"{response.status_code} - {duration:.3f}s"
    )

    return response
