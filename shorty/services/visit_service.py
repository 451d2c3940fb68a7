"""
Visit Service

This service records redirect events and serves the visit history.

Design Decisions:
- A visit is written synchronously in the redirect request, right after
  the target link is resolved, so the history is consistent with what
  clients were actually served
- Visits are never updated or deleted directly; they disappear only with
  their link (ON DELETE CASCADE)
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shorty.core.exceptions import DatabaseError
from shorty.db.models import LinkVisit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisitorInfo:
    """Request details stored with each visit."""

    ip: str = ""
    user_agent: str = ""
    referer: str = ""


class VisitService:
    """Service for recording and listing link visits."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record_visit(self, link_id: int, visitor: VisitorInfo, status: int) -> LinkVisit:
        """
        Insert one visit row for a served redirect.

        Args:
            link_id: The link that was resolved
            visitor: IP, User-Agent and Referer of the request
            status: HTTP status code returned to the client

        Raises:
            DatabaseError: If the insert fails
        """
        visit = LinkVisit(
            link_id=link_id,
            ip=visitor.ip,
            user_agent=visitor.user_agent,
            referer=visitor.referer,
            status=status,
        )
        self.session.add(visit)

        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"record visit for link {link_id}", original_error=e)

        return visit

    async def count_visits(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(LinkVisit))
        return result.scalar_one()

    async def list_visits(self) -> Sequence[LinkVisit]:
        result = await self.session.execute(select(LinkVisit).order_by(LinkVisit.id))
        return result.scalars().all()

    async def list_visits_range(self, offset: int, limit: int) -> Sequence[LinkVisit]:
        statement = select(LinkVisit).order_by(LinkVisit.id).limit(limit).offset(offset)
        result = await self.session.execute(statement)
        return result.scalars().all()
