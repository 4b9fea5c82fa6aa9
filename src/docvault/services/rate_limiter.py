"""Rate limiting service for API endpoints."""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.docvault.config import settings

logger = logging.getLogger(__name__)


def get_client_key(request: Request) -> str:
    """
    Rate limit key for unauthenticated auth endpoints.

    Sign-in and sign-up happen before a session exists, so requests are
    limited per client IP address.

    Args:
        request: FastAPI request object

    Returns:
        Key string for the limiter storage
    """
    return f"ip:{get_remote_address(request)}"


# Initialize rate limiter with in-memory storage
limiter = Limiter(
    key_func=get_client_key,
    default_limits=[],  # No global limits, we'll apply per-endpoint
    storage_uri="memory://",  # In-memory storage for single-instance deployment
    enabled=settings.rate_limit_enabled,
)


class RateLimitTiers:
    """
    Rate limit tiers for different endpoint categories.

    OTP requests send an email on every call, so they get the strictest tier.
    """

    # Session-scoped reads
    DEFAULT = ["100 per minute", "1000 per hour"]

    # Email code issuance (sign-in / sign-up)
    OTP = ["5 per minute", "30 per hour"]


# Note: These decorators require the endpoint to have a 'request: Request' parameter
# as per slowapi documentation requirements
default_rate_limit = limiter.limit(";".join(RateLimitTiers.DEFAULT))
otp_rate_limit = limiter.limit(";".join(RateLimitTiers.OTP))
