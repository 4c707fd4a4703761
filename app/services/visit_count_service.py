"""
Visit Count Service

This service handles incrementing click counts for short links.

Design Decisions:
- Uses a database-level atomic increment (no read-modify-write)
- Non-blocking operations designed for async execution from a background task
"""

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Redirect


class VisitCountService:
    """
    Service for managing click counts.

    This service is designed to be called asynchronously via background tasks.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the visit count service with a database session.

        Args:
            session: Async database session for database operations
        """
        self.session = session

    async def increment_clicks(self, slug: str) -> int:
        """
        Increment the click count for a slug atomically.

        Concurrent increments cannot lose updates because the addition
        happens inside the single UPDATE statement.

        Args:
            slug: The slug to increment count for

        Returns:
            Number of rows updated (0 if the slug doesn't exist)

        Note:
        - Commit is handled by the caller (background task)
        """
        statement = (
            update(Redirect)
            .where(Redirect.slug == slug)
            .values(clicks=Redirect.clicks + 1)
            .execution_options(synchronize_session=False)
        )

        result = await self.session.execute(statement)
        return result.rowcount

