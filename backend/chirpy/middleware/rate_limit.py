"""Rate limiting for API protection"""
import hashlib

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from chirpy.config import settings


def get_identifier(request: Request) -> str:
    """
    Get identifier for rate limiting

    Priority:
    1. Bearer token (hashed, so the raw credential never reaches the storage backend)
    2. IP address (for unauthenticated requests)
    """
    authorization = request.headers.get("authorization")
    if authorization and authorization.startswith("Bearer "):
        digest = hashlib.sha256(authorization.encode()).hexdigest()[:16]
        return f"token:{digest}"

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_identifier,
    default_limits=settings.RATE_LIMIT_DEFAULT,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)
