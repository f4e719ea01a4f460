# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a machine-readable code and, where possible, a suggestion on
# how to fix the request.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AuthgateException(Exception):
    """
    Base exception for the Authgate API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "AUTHGATE_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Verification Exceptions
# =============================================================================

class VerificationNotFoundError(AuthgateException):
    """Raised when a verification ID doesn't exist."""

    def __init__(self, verification_id: str):
        super().__init__(
            message=f"Verification not found: {verification_id}",
            code="VERIFICATION_NOT_FOUND",
            status_code=404,
            suggestion="Check the verification ID or create a new verification",
            details={"verification_id": verification_id}
        )


# =============================================================================
# Queue Dashboard Exceptions
# =============================================================================

class QueueNotFoundError(AuthgateException):
    """Raised when the dashboard is asked about a queue that isn't configured."""

    def __init__(self, queue: str, known: list[str]):
        super().__init__(
            message=f"Queue not found: {queue}",
            code="QUEUE_NOT_FOUND",
            status_code=404,
            suggestion=f"Known queues: {', '.join(known)}",
            details={"queue": queue, "known_queues": known}
        )


class QueueDashboardAuthError(AuthgateException):
    """Raised when a dashboard request carries no valid credentials."""

    def __init__(self, reason: str = "Authentication required"):
        super().__init__(
            message=reason,
            code="QUEUE_DASHBOARD_UNAUTHORIZED",
            status_code=401,
            suggestion="Sign in with the queue dashboard credentials",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def authgate_exception_handler(
    request: Request,
    exc: AuthgateException
) -> JSONResponse:
    """
    Convert AuthgateException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    headers = None
    if isinstance(exc, QueueDashboardAuthError):
        headers = {"WWW-Authenticate": 'Basic realm="queues"'}

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Unknown fields, missing fields and malformed values all end up here
    and are reported as 422 with one entry per problem.
    """
    errors = [
        {
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]

    logger.debug(f"Validation failed for {request.method} {request.url.path}: {errors}")

    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors,
        })
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Return a generic 500 for anything not handled above.

    The error has already been reported by SentryMiddleware on its way out.
    """
    logger.exception(f"Unexpected error: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )
