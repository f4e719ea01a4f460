# =============================================================================
# app/dashboard_auth.py - Job Queue Dashboard Authentication
# =============================================================================
# The dashboard under /api/queues is gated separately from the rest of the
# API. A request passes when it carries either:
#   1. a valid signed `queue_dashboard_session` cookie, or
#   2. HTTP Basic credentials matching QUEUE_DASHBOARD_USERNAME/PASSWORD.
# A successful Basic login is answered with a fresh session cookie so the
# browser doesn't have to resend the password.
# =============================================================================

import base64
import binascii
import logging
import secrets
from dataclasses import dataclass

from starlette.requests import HTTPConnection

from app.config import Settings
from app.exceptions import QueueDashboardAuthError
from lib.cookies import get_signed_cookie

logger = logging.getLogger(__name__)

QUEUE_DASHBOARD_PATH = "/queues"
DASHBOARD_COOKIE = "queue_dashboard_session"


@dataclass(frozen=True)
class DashboardAuthResult:
    """Who was authenticated and whether a session cookie should be issued."""
    username: str
    issue_cookie: bool


def parse_basic_auth(header: str | None) -> tuple[str, str] | None:
    """
    Decode an `Authorization: Basic ...` header.

    Returns:
        (username, password), or None if the header is absent or malformed
    """
    if not header:
        return None

    scheme, _, encoded = header.partition(" ")
    if scheme.lower() != "basic" or not encoded:
        return None

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    username, sep, password = decoded.partition(":")
    if not sep:
        return None
    return username, password


def credentials_match(username: str, password: str, config: Settings) -> bool:
    """Constant-time comparison against the configured credentials."""
    user_ok = secrets.compare_digest(
        username.encode("utf-8"), config.QUEUE_DASHBOARD_USERNAME.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        password.encode("utf-8"), config.QUEUE_DASHBOARD_PASSWORD.encode("utf-8")
    )
    return user_ok and password_ok


def authenticate_dashboard_request(connection: HTTPConnection, config: Settings) -> DashboardAuthResult:
    """
    Authenticate a request to the job queue dashboard.

    Raises:
        QueueDashboardAuthError: If neither the cookie nor Basic credentials are valid
    """
    session_user = get_signed_cookie(connection, DASHBOARD_COOKIE, config.AUTH_SECRET)
    if session_user and secrets.compare_digest(
        session_user.encode("utf-8"), config.QUEUE_DASHBOARD_USERNAME.encode("utf-8")
    ):
        return DashboardAuthResult(username=session_user, issue_cookie=False)

    credentials = parse_basic_auth(connection.headers.get("authorization"))
    if credentials is None:
        raise QueueDashboardAuthError()

    username, password = credentials
    if not credentials_match(username, password, config):
        logger.warning(f"Rejected queue dashboard login for user {username!r}")
        raise QueueDashboardAuthError("Invalid dashboard credentials")

    return DashboardAuthResult(username=username, issue_cookie=True)
