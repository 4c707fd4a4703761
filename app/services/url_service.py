"""
URL Shortening Service

This service handles the core business logic for creating short links:
- Generating random slugs and owner secrets
- Validating destination URLs
- Inserting records, retrying on slug collisions

Design Decisions:
- Random, not counter-based: slugs are drawn from a CSPRNG so they reveal
  nothing about how many links exist or when they were made
- Base62 alphabet: [0-9a-zA-Z] for maximum URL compatibility
- 6 characters by default: 62^6 (~5.7e10) possible slugs
- The secret is a separate 18-byte token; it is never derived from the slug
- Uniqueness is enforced by the database, not by a read-before-insert check
"""

import logging
import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DatabaseError, InvalidURLError, MissingURLError
from app.core.setting import settings
from app.core.validators import is_valid_url
from app.db.models import Redirect
from app.db.session import db_adapter

logger = logging.getLogger(__name__)

BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def generate_slug(length: Optional[int] = None) -> str:
    """
    Generate a random base62 slug.

    Args:
        length: Number of characters (default: settings.SLUG_LENGTH)

    Returns:
        Slug such as "aZ3k9Q"
    """
    length = length or settings.SLUG_LENGTH
    return "".join(secrets.choice(BASE62_CHARS) for _ in range(length))


def generate_secret(nbytes: Optional[int] = None) -> str:
    """
    Generate an owner secret: URL-safe base64 without padding.

    18 bytes encode to 24 characters.
    """
    return secrets.token_urlsafe(nbytes or settings.SECRET_BYTES)


def clean_url(url: Optional[str]) -> str:
    """
    Trim and validate a destination URL.

    Raises:
        MissingURLError: If nothing is left after trimming
        InvalidURLError: If it is not an absolute http/https URL
    """
    if url is None or not url.strip():
        raise MissingURLError()

    url = url.strip()
    if not is_valid_url(url):
        raise InvalidURLError(url)

    return url


class URLShorteningService:
    """
    Core business logic for creating short links.

    Handles URL validation, slug/secret generation and the insert-with-retry
    loop. Separated from API layer for testability and maintainability.
    """

    def __init__(self, session: AsyncSession, max_attempts: Optional[int] = None):
        """
        Initialize the URL shortening service.

        Args:
            session: Database session
            max_attempts: Insert attempts before giving up on slug collisions
        """
        self.session = session
        self.max_attempts = max_attempts or settings.CREATE_MAX_ATTEMPTS

    async def create_redirect(self, url: Optional[str]) -> Redirect:
        """
        Create a new short link for ``url``.

        A fresh (slug, secret) pair is drawn for every attempt. Only a unique
        violation on ``slug`` is retried; every other failure is terminal.

        Args:
            url: The destination URL

        Returns:
            The persisted Redirect with clicks = 0

        Raises:
            MissingURLError: If URL is empty
            InvalidURLError: If URL format is invalid
            DatabaseError: If the insert fails or every attempt collided
        """
        url = clean_url(url)

        for attempt in range(1, self.max_attempts + 1):
            redirect = Redirect(
                slug=generate_slug(),
                url=url,
                clicks=0,
                secret=generate_secret(),
            )

            try:
                self.session.add(redirect)
                await self.session.flush()
                await self.session.commit()
                await self.session.refresh(redirect)
                logger.info(f"Created redirect {redirect.slug}")
                return redirect

            except IntegrityError as e:
                await self.session.rollback()
                if db_adapter.is_unique_violation(e, "slug"):
                    logger.warning(
                        f"Slug collision on '{redirect.slug}' "
                        f"(attempt {attempt}/{self.max_attempts})"
                    )
                    continue
                raise DatabaseError(
                    "Failed to create redirect: database constraint violation",
                    original_error=e
                )
            except Exception as e:
                await self.session.rollback()
                raise DatabaseError(
                    f"Failed to create redirect: {str(e)}",
                    original_error=e
                )

        raise DatabaseError(
            f"Failed to create redirect: no free slug after {self.max_attempts} attempts"
        )

    async def get_redirect(self, slug: str) -> Optional[Redirect]:
        """
        Retrieve the record for a given slug.

        Args:
            slug: The slug to look up

        Returns:
            Redirect object if found, None otherwise
        """
        statement = select(Redirect).where(Redirect.slug == slug)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()
