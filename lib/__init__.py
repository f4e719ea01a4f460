# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - cookies.py: Signed cookie helpers (JWS, keyed by AUTH_SECRET)
# - utils.py: Shared utilities (UTC time helpers)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.cookies import get_signed_cookie, set_signed_cookie, sign_value, unsign_value
from lib.utils import as_utc, utcnow

__all__ = [
    # Cookies
    "get_signed_cookie",
    "set_signed_cookie",
    "sign_value",
    "unsign_value",
    # Utils
    "as_utc",
    "utcnow",
]
