# =============================================================================
# lib/cookies.py - Signed Cookies
# =============================================================================
# Cookie values are wrapped in a compact JWS (HS256) signed with AUTH_SECRET,
# so a client can read but not forge or extend them.
#
# Usage:
#   from lib.cookies import set_signed_cookie, get_signed_cookie
#
#   set_signed_cookie(response, "session", "value", secret=..., max_age=3600)
#   value = get_signed_cookie(request, "session", secret=...)
# =============================================================================

from __future__ import annotations

import json
import logging
import time

from jose import jws
from jose.exceptions import JWSError
from starlette.requests import HTTPConnection
from starlette.responses import Response

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def sign_value(value: str, secret: str, max_age: int | None = None) -> str:
    """
    Sign a value for storage in a cookie.

    Args:
        value: The plain value
        secret: Signing secret
        max_age: Optional lifetime in seconds, enforced by unsign_value()

    Returns:
        Compact JWS string
    """
    payload: dict[str, str | int] = {"v": value}
    if max_age is not None:
        payload["exp"] = int(time.time()) + max_age
    return jws.sign(payload, secret, algorithm=ALGORITHM)


def unsign_value(token: str, secret: str) -> str | None:
    """
    Verify a signed cookie value.

    Returns:
        The original value, or None if the signature is invalid,
        the payload is malformed, or the value has expired.
    """
    try:
        raw = jws.verify(token, secret, algorithms=[ALGORITHM])
    except JWSError:
        logger.debug("Rejected cookie with invalid signature")
        return None

    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return None

    if not isinstance(payload, dict) or "v" not in payload:
        return None

    exp = payload.get("exp")
    if exp is not None and int(exp) <= int(time.time()):
        logger.debug("Rejected expired cookie")
        return None

    return payload["v"]


def set_signed_cookie(
    response: Response,
    name: str,
    value: str,
    secret: str,
    max_age: int,
    path: str = "/",
    secure: bool = False,
) -> None:
    """Set an httponly, signed cookie on a response."""
    response.set_cookie(
        key=name,
        value=sign_value(value, secret, max_age=max_age),
        max_age=max_age,
        path=path,
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def get_signed_cookie(connection: HTTPConnection, name: str, secret: str) -> str | None:
    """Read and verify a signed cookie. Returns None if missing or invalid."""
    token = connection.cookies.get(name)
    if not token:
        return None
    return unsign_value(token, secret)
