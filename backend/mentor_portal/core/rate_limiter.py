"""
Rate Limiting for the Project Mentor Portal
===========================================
slowapi limiter with in-process storage. Only the login endpoint is limited
(brute force protection); everything else is behind a session already.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from mentor_portal.core.config import settings
from mentor_portal.core.logging_config import logger


def get_client_identifier(request: Request) -> str:
    """Rate limit key: client IP address"""
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_client_identifier,
    storage_uri="memory://",
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Return a `{message}` body with a Retry-After header"""
    logger.warning(
        f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}"
    )

    return JSONResponse(
        status_code=429,
        content={"message": "Too many requests. Please slow down."},
        headers={"Retry-After": "60"},
    )


def login_rate_limit():
    """Rate limit for the login endpoint (LOGIN_RATE_LIMIT)"""
    return limiter.limit(settings.LOGIN_RATE_LIMIT, key_func=get_client_identifier)
