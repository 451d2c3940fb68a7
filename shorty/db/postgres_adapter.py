"""
PostgreSQL Database Adapter

This module implements the DatabaseAdapter interface for PostgreSQL
through the asyncpg driver (postgresql+asyncpg://...).

Unlike SQLite, PostgreSQL is a server-based database, so the adapter
keeps SQLAlchemy's default QueuePool and tunes its size instead.
"""

from typing import Any, Optional

from sqlalchemy.pool import Pool

from shorty.db.interface import DatabaseAdapter

UNIQUE_VIOLATION = "23505"


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL database adapter implementation."""

    def __init__(self, pool_size: int = 10, max_overflow: int = 20):
        self.pool_size = pool_size
        self.max_overflow = max_overflow

    def get_pool_class(self) -> Optional[type[Pool]]:
        return None

    def get_connect_args(self) -> dict[str, Any]:
        return {}

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False,
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_pre_ping": True,
        }

    def get_dialect_name(self) -> str:
        return "postgresql"

    def is_unique_violation(self, error: BaseException) -> bool:
        """
        Detect PostgreSQL unique violations by SQLSTATE.

        SQLAlchemy's asyncpg adapter copies the SQLSTATE onto `pgcode` and
        `sqlstate`; psycopg exposes `pgcode` / `sqlstate` as well.
        """
        orig = self.driver_error(error)
        code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
        return code == UNIQUE_VIOLATION
