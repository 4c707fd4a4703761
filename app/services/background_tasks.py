"""
Background Task Helpers

Provides helper functions for background tasks that create their own database sessions.
Background tasks cannot use the endpoint's session as it's closed after the endpoint returns.

FastAPI runs these after the response has been sent but before the request
is finished, so a redirect is never delayed by the write and the write is
never dropped.
"""

import logging

from app.db.session import async_session_maker
from app.services.visit_count_service import VisitCountService

logger = logging.getLogger(__name__)


async def increment_clicks_background(slug: str) -> None:
    """
    Background task to increment the click count.

    Failures are logged and swallowed: the visitor already has the redirect.

    Args:
        slug: The slug that was resolved
    """
    try:
        async with async_session_maker() as session:
            visit_count_service = VisitCountService(session)
            updated = await visit_count_service.increment_clicks(slug)
            await session.commit()
            if not updated:
                logger.warning(f"Click for {slug} matched no row")
    except Exception as e:
        logger.error(
            f"Failed to increment clicks for {slug}: {str(e)}",
            exc_info=True
        )
