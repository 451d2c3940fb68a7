"""
Link Service

This service handles the core business logic for link management:
- Listing, reading, creating, updating and deleting links
- Generating short names when the caller does not choose one
- Translating unique-constraint violations into ShortNameConflictError

Design Decisions:
- The database is the only arbiter of short_name uniqueness. No "does it
  exist?" pre-check is made; the insert is attempted and a unique
  violation is classified through the DatabaseAdapter.
- Generated codes are retried a bounded number of times. Running out of
  attempts is reported as ShortCodeExhaustedError, distinct from a
  single conflict.
"""

import logging
from typing import Callable, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shorty.core.exceptions import (
    DatabaseError,
    NotFoundError,
    ShortCodeExhaustedError,
    ShortNameConflictError,
)
from shorty.db.adapters import get_database_adapter
from shorty.db.interface import DatabaseAdapter
from shorty.db.models import Link
from shorty.services.short_code import DEFAULT_CODE_LENGTH, generate_short_code

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10


class LinkService:
    """
    Core business logic for links.

    Separated from API layer for testability and maintainability.
    """

    def __init__(
        self,
        session: AsyncSession,
        code_length: int = DEFAULT_CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        code_generator: Optional[Callable[[int], str]] = None,
        db_adapter: Optional[DatabaseAdapter] = None,
    ):
        """
        Initialize the link service.

        Args:
            session: Database session
            code_length: Length of generated short names
            max_attempts: Insert attempts before giving up on generated names
            code_generator: Override for the short code generator
            db_adapter: Adapter used to classify integrity errors; defaults to
                the one matching the session's dialect
        """
        self.session = session
        self.code_length = code_length
        self.max_attempts = max_attempts
        self.code_generator = code_generator or generate_short_code
        self.db_adapter = db_adapter or get_database_adapter(session.bind.dialect.name)

    async def count_links(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Link))
        return result.scalar_one()

    async def list_links(self) -> Sequence[Link]:
        result = await self.session.execute(select(Link).order_by(Link.id))
        return result.scalars().all()

    async def list_links_range(self, offset: int, limit: int) -> Sequence[Link]:
        statement = select(Link).order_by(Link.id).limit(limit).offset(offset)
        result = await self.session.execute(statement)
        return result.scalars().all()

    async def get_link(self, link_id: int) -> Link:
        """
        Fetch a link by id.

        Raises:
            NotFoundError: If no link has this id
        """
        link = await self.session.get(Link, link_id)
        if link is None:
            raise NotFoundError()
        return link

    async def get_link_by_short_name(self, short_name: str) -> Optional[Link]:
        statement = select(Link).where(Link.short_name == short_name)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def create_link(self, original_url: str, short_name: Optional[str] = None) -> Link:
        """
        Create a link, generating a short name if none was given.

        Args:
            original_url: Already validated long URL
            short_name: Already validated short name, or None/empty to generate one

        Returns:
            The persisted Link

        Raises:
            ShortNameConflictError: If the requested short_name is taken
            ShortCodeExhaustedError: If every generated code collided
            DatabaseError: If any other database operation fails
        """
        if short_name:
            return await self._insert(original_url, short_name)

        for attempt in range(1, self.max_attempts + 1):
            candidate = self.code_generator(self.code_length)
            try:
                return await self._insert(original_url, candidate)
            except ShortNameConflictError:
                logger.info(
                    f"Short code collision on attempt {attempt}/{self.max_attempts}: {candidate}"
                )

        logger.error(f"Failed to generate unique short_name after {self.max_attempts} attempts")
        raise ShortCodeExhaustedError(self.max_attempts)

    async def update_link(self, link_id: int, original_url: str, short_name: str) -> Link:
        """
        Replace both fields of an existing link.

        Raises:
            NotFoundError: If no link has this id
            ShortNameConflictError: If short_name belongs to another link
            DatabaseError: If any other database operation fails
        """
        link = await self.get_link(link_id)
        link.original_url = original_url
        link.short_name = short_name
        await self._commit(short_name)
        return link

    async def delete_link(self, link_id: int) -> None:
        """
        Delete a link. Its visits are removed by the ON DELETE CASCADE.

        Raises:
            NotFoundError: If no link has this id
        """
        try:
            result = await self.session.execute(delete(Link).where(Link.id == link_id))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to delete link {link_id}: {str(e)}", exc_info=True)
            raise DatabaseError("delete link", original_error=e)

        if result.rowcount == 0:
            raise NotFoundError()

    async def _insert(self, original_url: str, short_name: str) -> Link:
        link = Link(original_url=original_url, short_name=short_name)
        self.session.add(link)
        await self._commit(short_name)
        return link

    async def _commit(self, short_name: str) -> None:
        try:
            await self.session.flush()
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if self.db_adapter.is_unique_violation(e):
                raise ShortNameConflictError(short_name)
            logger.error(f"Integrity error saving link {short_name!r}: {str(e)}", exc_info=True)
            raise DatabaseError("constraint violation", original_error=e)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to save link {short_name!r}: {str(e)}", exc_info=True)
            raise DatabaseError("save link", original_error=e)
