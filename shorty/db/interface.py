"""
Database Abstraction Interface

This module defines the database abstraction layer that allows switching between
different database backends (SQLite, PostgreSQL) without changing the
rest of the codebase.

Besides engine configuration, each adapter knows how its driver reports
constraint violations, so services can ask "was this failed write a unique
violation?" without importing driver-specific error types.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import Pool


class DatabaseAdapter(ABC):
    """
    Abstract base class for database adapters.

    This interface defines the contract that all database implementations
    must follow.

    To add a new database backend:
    1. Create a new class inheriting from DatabaseAdapter
    2. Implement all abstract methods
    3. Register it in shorty.db.adapters
    """

    def create_engine(self, database_url: str, **kwargs) -> AsyncEngine:
        """
        Create and configure the async database engine.

        Args:
            database_url: Connection string for the database
            **kwargs: Additional engine options (merged with adapter defaults)

        Returns:
            Configured AsyncEngine instance
        """
        engine_kwargs = self.get_engine_kwargs()
        engine_kwargs.update(kwargs)

        pool_class = self.get_pool_class()
        if pool_class is not None:
            engine_kwargs["poolclass"] = pool_class

        engine = create_async_engine(
            database_url,
            connect_args=self.get_connect_args(),
            **engine_kwargs
        )
        self.configure_engine(engine)
        return engine

    def configure_engine(self, engine: AsyncEngine) -> None:
        """Hook for per-connection setup (event listeners, pragmas)."""

    @abstractmethod
    def get_pool_class(self) -> Optional[type[Pool]]:
        """
        Get the connection pool class for this database type.

        Returns:
            Pool class or None to use the dialect default
        """
        pass

    @abstractmethod
    def get_connect_args(self) -> dict[str, Any]:
        """Get connection arguments specific to this database type."""
        pass

    @abstractmethod
    def get_engine_kwargs(self) -> dict[str, Any]:
        """Get additional engine configuration specific to this database type."""
        pass

    @abstractmethod
    def get_dialect_name(self) -> str:
        """
        Get the SQLAlchemy dialect name for this database.

        Returns:
            Dialect name (e.g., 'sqlite', 'postgresql')
        """
        pass

    @abstractmethod
    def is_unique_violation(self, error: BaseException) -> bool:
        """
        Report whether a failed write was rejected by a unique constraint.

        Args:
            error: The exception raised by SQLAlchemy (usually IntegrityError)
                or the raw driver exception

        Returns:
            True only for unique-constraint violations
        """
        pass

    @staticmethod
    def driver_error(error: BaseException) -> BaseException:
        """Unwrap the DBAPI exception carried by a SQLAlchemy error."""
        if isinstance(error, DBAPIError) and error.orig is not None:
            return error.orig
        return error
