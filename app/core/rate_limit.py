"""
Rate Limiting Configuration

This module provides rate limiting functionality for API endpoints.
Rate limiting prevents abuse and ensures fair usage.

Design Decisions:
- Uses slowapi for rate limiting (lightweight, FastAPI-compatible)
- Different limits for different endpoints, configurable via settings
- IP-based limiting
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.setting import settings

# Initialize rate limiter
# Uses IP address for rate limiting
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

# Rate limit configurations per endpoint
RATE_LIMITS = {
    "create": settings.RATE_LIMIT_CREATE,
    "redirect": settings.RATE_LIMIT_REDIRECT,
    "read": settings.RATE_LIMIT_READ,
    "update": settings.RATE_LIMIT_UPDATE,
    "qr": settings.RATE_LIMIT_QR,
}
