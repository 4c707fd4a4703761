"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.
These functions help prevent security issues and ensure data integrity.

Security Considerations:
- Slugs are restricted to the base62 alphabet before they reach a query
- Only http/https destinations are accepted
- Length limits prevent DoS attacks
- Secret aliases are collapsed into one value at the HTTP boundary
"""

import re
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

MAX_URL_LENGTH = 2048
MAX_SLUG_LENGTH = 20

# Accepted names for the owner secret, in priority order.
SECRET_ALIASES = ("secret", "token", "ownerToken", "adminToken")

_SLUG_PATTERN = re.compile(r'^[0-9a-zA-Z]+$')


def sanitize_slug(slug: Optional[str]) -> Optional[str]:
    """
    Sanitize and validate slug format.

    Slugs should only contain base62 characters: [0-9a-zA-Z]

    Args:
        slug: The slug to sanitize

    Returns:
        Sanitized slug if valid, None otherwise
    """
    if not slug or not isinstance(slug, str):
        return None

    slug = slug.strip()

    if len(slug) > MAX_SLUG_LENGTH:
        return None

    if not _SLUG_PATTERN.match(slug):
        return None

    return slug


def validate_url_length(url: str, max_length: int = MAX_URL_LENGTH) -> bool:
    """
    Validate URL length to prevent DoS attacks.

    Args:
        url: The URL to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if URL length is valid, False otherwise
    """
    return bool(url) and len(url) <= max_length


def is_valid_url(url: str) -> bool:
    """
    Check that ``url`` is an absolute http(s) URL with a host.

    Prevents javascript:, file:, data: and other non-web schemes.
    """
    if not url or not isinstance(url, str):
        return False

    if not validate_url_length(url):
        return False

    try:
        result = urlparse(url)
        # Accessing .port validates the port range
        result.port
    except ValueError:
        return False

    if result.scheme.lower() not in {"http", "https"}:
        return False

    if not result.hostname:
        return False

    if any(ch.isspace() for ch in url):
        return False

    return True


def pick_secret(source: Mapping[str, Any]) -> Optional[str]:
    """
    Return the first non-empty secret found under any accepted alias.

    Works for query parameters and JSON bodies alike.
    """
    for alias in SECRET_ALIASES:
        value = source.get(alias)
        if isinstance(value, str) and value.strip():
            return value
    return None
