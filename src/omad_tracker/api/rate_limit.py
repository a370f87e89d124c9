"""Rate limiting for API routes.

Signed-in requests are limited per user, everything else per client IP.
"""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

AUTH_RATE_LIMIT = "5/minute"
API_RATE_LIMIT = "100/minute"


def rate_limit_key(request: Request) -> str:
    """Return the user id set by the session dependency, or the client IP."""
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(key_func=rate_limit_key)
