"""
Redirect Service

This service resolves a short name to its original URL and records the
visit.

Design Decisions:
- The visit is recorded before the redirect response is built
- A failed visit insert never blocks the redirect; it is logged at error
  level and forwarded to error monitoring instead
"""

import logging

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from shorty.core.exceptions import DatabaseError, NotFoundError
from shorty.core.monitoring import report_exception
from shorty.services.link_service import LinkService
from shorty.services.visit_service import VisitService, VisitorInfo

logger = logging.getLogger(__name__)

REDIRECT_STATUS = status.HTTP_302_FOUND


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
        self.link_service = LinkService(session)
        self.visit_service = VisitService(session)

    async def follow(self, short_name: str, visitor: VisitorInfo) -> str:
        """
        Resolve a short name and record the visit.

        Args:
            short_name: Path parameter from /r/{short_name}
            visitor: Request details to store with the visit

        Returns:
            The original URL to redirect to

        Raises:
            NotFoundError: If the short name is blank or unknown
        """
        short_name = short_name.strip()
        if not short_name:
            raise NotFoundError()

        link = await self.link_service.get_link_by_short_name(short_name)
        if link is None:
            raise NotFoundError()

        # Read before the insert: a rollback would expire the instance
        original_url = link.original_url

        try:
            await self.visit_service.record_visit(link.id, visitor, REDIRECT_STATUS)
        except DatabaseError as e:
            logger.error(
                f"Failed to record visit for {short_name}: {str(e.original_error)}",
                exc_info=e.original_error,
            )
            report_exception(e.original_error or e)

        return original_url
