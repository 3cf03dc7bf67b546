"""
Rate limiting using slowapi.
Only the stats routes are limited; tracking routes must always respond.
"""

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from fastapi import Request

from app.core.config import settings
from app.utils.tracking import client_ip


def _get_client_key(request: Request) -> str:
    """Key requests by forwarded client address when behind a proxy."""
    return client_ip(request) or get_remote_address(request)


limiter = Limiter(
    key_func=_get_client_key,
    enabled=settings.rate_limit_enabled,
    storage_uri="memory://",
)


def setup_rate_limiting(app):
    """Configure rate limiting for the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
