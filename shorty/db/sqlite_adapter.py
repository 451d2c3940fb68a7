"""
SQLite Database Adapter

This module implements the DatabaseAdapter interface for SQLite.
All SQLite-specific configuration and behavior is encapsulated here.

Key characteristics:
- File-based (single .db file)
- No server required
- Single writer at a time (file locking)
- Foreign keys are off by default and must be enabled per connection,
  otherwise deleting a link would not cascade to its visits
"""

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.pool import NullPool

from shorty.db.interface import DatabaseAdapter

UNIQUE_ERROR_NAME = "SQLITE_CONSTRAINT_UNIQUE"
UNIQUE_ERROR_PREFIX = "UNIQUE constraint failed"


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SQLiteAdapter(DatabaseAdapter):
    """
    SQLite database adapter implementation.

    This adapter handles all SQLite-specific configuration and operations.
    """

    def configure_engine(self, engine: AsyncEngine) -> None:
        event.listen(engine.sync_engine, "connect", _enable_foreign_keys)

    def get_pool_class(self) -> type[NullPool]:
        """
        Get the connection pool class for SQLite.

        SQLite uses NullPool: the file-based database doesn't benefit from
        connection pooling and handles one writer at a time.
        """
        return NullPool

    def get_connect_args(self) -> dict[str, Any]:
        return {
            "check_same_thread": False
        }

    def get_engine_kwargs(self) -> dict[str, Any]:
        return {
            "echo": False  # Set to True only for SQL debugging in development
        }

    def get_dialect_name(self) -> str:
        return "sqlite"

    def is_unique_violation(self, error: BaseException) -> bool:
        """
        Detect SQLite unique violations.

        Python 3.11+ exposes the extended result code as `sqlite_errorname`;
        older interpreters only carry the message text.
        """
        orig = self.driver_error(error)

        error_name = getattr(orig, "sqlite_errorname", None)
        if error_name is not None:
            return error_name == UNIQUE_ERROR_NAME

        return str(orig).startswith(UNIQUE_ERROR_PREFIX)
