"""Rate limiting for the login endpoint and API defaults"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from voyage_admin.config import settings


def get_identifier(request: Request) -> str:
    """
    Get identifier for rate limiting

    Priority:
    1. Bearer token prefix (authenticated admin session)
    2. IP address (login and other unauthenticated calls)
    """
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        return f"session:{authorization[7:39]}"

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_identifier,
    default_limits=settings.RATE_LIMIT_DEFAULT,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


RATE_LIMITS = {
    "login": settings.RATE_LIMIT_LOGIN,
    "admin_create": "50/hour",
}


def get_rate_limit(endpoint: str) -> str:
    """Get rate limit for specific endpoint"""
    return RATE_LIMITS.get(endpoint, settings.RATE_LIMIT_DEFAULT[0])
