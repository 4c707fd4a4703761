"""
Owner Service

This service handles the secret-gated operations on a short link:
- Reading the full record (including click count) for its owner
- Changing the destination URL

Design Decisions:
- Read distinguishes 404 (unknown slug) from 403 (wrong secret)
- Update is one conditional UPDATE matching slug AND secret, so the check
  and the write cannot be separated; a miss is reported as a single
  "forbidden or not found" outcome
- Secrets are compared in constant time on the read path
"""

import logging
import secrets
from typing import Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DatabaseError,
    ForbiddenError,
    ForbiddenOrNotFoundError,
    MissingSecretError,
    SlugNotFoundError,
)
from app.db.models import Redirect
from app.services.url_service import URLShorteningService, clean_url

logger = logging.getLogger(__name__)


class OwnerService:
    """
    Service for operations that require the owner secret.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the owner service with a database session.

        Args:
            session: Async database session for database operations
        """
        self.session = session
        self.url_service = URLShorteningService(session)

    async def get_redirect(self, slug: str, secret: Optional[str]) -> Redirect:
        """
        Load a record for its owner.

        Args:
            slug: The slug to look up
            secret: Secret presented by the caller

        Returns:
            The Redirect, secret included

        Raises:
            MissingSecretError: If no secret was presented
            SlugNotFoundError: If the slug doesn't exist
            ForbiddenError: If the secret doesn't match
        """
        if not secret:
            raise MissingSecretError()

        redirect = await self.url_service.get_redirect(slug)
        if redirect is None:
            raise SlugNotFoundError(slug)

        if not secrets.compare_digest(redirect.secret.encode(), secret.encode()):
            raise ForbiddenError()

        return redirect

    async def update_redirect(
        self,
        slug: str,
        secret: Optional[str],
        url: Optional[str],
    ) -> Redirect:
        """
        Point an existing slug at a new destination.

        Args:
            slug: The slug to update
            secret: Secret presented by the caller
            url: New destination URL

        Returns:
            The record as stored after the update

        Raises:
            MissingSecretError: If no secret was presented (checked first)
            MissingURLError / InvalidURLError: If the new URL is unusable
            ForbiddenOrNotFoundError: If no row matched slug and secret
            DatabaseError: If the update fails
        """
        if not secret:
            raise MissingSecretError()

        url = clean_url(url)

        statement = (
            update(Redirect)
            .where(Redirect.slug == slug, Redirect.secret == secret)
            .values(url=url)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self.session.execute(statement)
            if result.rowcount == 0:
                await self.session.rollback()
                raise ForbiddenOrNotFoundError()
            await self.session.commit()
        except ForbiddenOrNotFoundError:
            raise
        except Exception as e:
            await self.session.rollback()
            raise DatabaseError(f"Failed to update redirect: {str(e)}", original_error=e)

        redirect = await self.url_service.get_redirect(slug)
        if redirect is None:
            raise DatabaseError(f"Redirect {slug} vanished after update")

        # Fresh values, not whatever an earlier load left in the identity map
        await self.session.refresh(redirect)
        logger.info(f"Updated destination of {slug}")
        return redirect
