"""
Custom Exceptions

This module defines custom exceptions for better error handling
and more specific error messages.

Each exception maps onto one HTTP outcome in the API layer:
- Validation errors (missing/invalid URL, missing slug, bad QR options) -> 400
- Missing credential -> 401
- Wrong credential, or the ambiguous update miss -> 403
- Unknown slug on the owner read path -> 404
- Storage failures -> 500
"""

from typing import Optional


class URLShortenerException(Exception):
    """Base exception for URL shortener service."""
    pass


class MissingURLError(URLShortenerException):
    """Raised when no destination URL was supplied."""

    def __init__(self):
        super().__init__("Missing URL")


class InvalidURLError(URLShortenerException):
    """Raised when URL validation fails."""

    def __init__(self, url: str, reason: str = "Invalid URL"):
        self.url = url
        self.reason = reason
        super().__init__(reason)


class MissingSlugError(URLShortenerException):
    """Raised when a slug path segment is empty."""

    def __init__(self):
        super().__init__("Missing slug")


class MissingSecretError(URLShortenerException):
    """Raised when none of the accepted secret parameters carries a value."""

    def __init__(self):
        super().__init__("Missing secret")


class SlugNotFoundError(URLShortenerException):
    """Raised when a slug is not found in the database."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Slug '{slug}' not found")


class ForbiddenError(URLShortenerException):
    """Raised when the presented secret does not match the stored one."""

    def __init__(self):
        super().__init__("Forbidden")


class ForbiddenOrNotFoundError(URLShortenerException):
    """Raised when a conditional update matched no row."""

    def __init__(self):
        super().__init__("Forbidden or not found")


class InvalidQROptionsError(URLShortenerException):
    """Raised when QR rendering options are out of range."""

    def __init__(self, option: str, value: str):
        self.option = option
        self.value = value
        super().__init__(f"Invalid {option}: {value!r}")


class DatabaseError(URLShortenerException):
    """Raised when database operations fail."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
