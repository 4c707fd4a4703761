"""
Redirect Service

This service handles the slug -> destination lookup on the hot path.
Separated from URL service so the resolution path stays a single read;
the click increment runs afterwards as a background task.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.services.url_service import URLShorteningService


class RedirectService:
    """
    Service for handling URL redirections.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the redirect service with a database session.

        Args:
            session: Async database session for database operations
        """
        self.session = session
        self.url_service = URLShorteningService(session)

    async def get_redirect_url(self, slug: str) -> Optional[str]:
        """
        Get the destination URL for redirection, or None for an unknown slug.
        """
        redirect = await self.url_service.get_redirect(slug)
        if redirect:
            return redirect.url
        return None
