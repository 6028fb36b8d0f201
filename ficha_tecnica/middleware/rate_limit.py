"""Rate limiting for the Gemini-backed endpoint, using slowapi."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ficha_tecnica.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_hour}/hour"],
    storage_uri="memory://",
)


def rate_limit_dependency(request: Request) -> None:
    """
    Rate limit dependency for FastAPI.

    Raises:
        RateLimitExceeded: If rate limit is exceeded
    """
    # slowapi only exposes this check through its private helper when the
    # limiter is used as a dependency rather than a route decorator.
    limiter._check_request_limit(request, endpoint_func=None)
