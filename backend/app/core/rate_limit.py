"""
Request rate limiting with slowapi.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings


def create_limiter() -> Limiter:
    """Limiter keyed by client address with a per-minute default limit."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{settings.RATE_LIMIT_PER_MINUTE}/minute"],
        enabled=settings.RATE_LIMIT_ENABLED,
    )


limiter = create_limiter()
