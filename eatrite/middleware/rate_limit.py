"""Rate limiting using slowapi."""

from fastapi import Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address

from eatrite.config import settings

# Limit applied to the generation routes
GENERATION_RATE_LIMIT = f"{settings.rate_limit_per_hour}/hour"


def get_client_key(request: Request) -> str:
    """
    Key requests by client address.

    Authorization headers are never validated by this service, so they are
    not used as rate-limit keys.
    """
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_key,
    storage_uri="memory://",  # In-memory storage
)


def get_rate_limit_exceeded_handler():
    """Get rate limit exceeded handler."""
    return _rate_limit_exceeded_handler
