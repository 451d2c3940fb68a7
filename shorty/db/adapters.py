"""
Database adapter registry.

Maps SQLAlchemy dialect names to their DatabaseAdapter so the rest of the
code never branches on the backend.
"""

from sqlalchemy.engine import make_url

from shorty.db.interface import DatabaseAdapter
from shorty.db.postgres_adapter import PostgreSQLAdapter
from shorty.db.sqlite_adapter import SQLiteAdapter

ADAPTER_CLASSES: tuple[type[DatabaseAdapter], ...] = (SQLiteAdapter, PostgreSQLAdapter)

# Keyed by each adapter's own dialect name
_ADAPTERS: dict[str, type[DatabaseAdapter]] = {
    adapter_class().get_dialect_name(): adapter_class for adapter_class in ADAPTER_CLASSES
}


def get_database_adapter(dialect_name: str = "sqlite") -> DatabaseAdapter:
    """
    Factory function to get the database adapter for a dialect.

    Raises:
        ValueError: If no adapter is registered for the dialect
    """
    try:
        adapter_class = _ADAPTERS[dialect_name]
    except KeyError:
        raise ValueError(f"Unsupported database dialect: {dialect_name}")
    return adapter_class()


def get_adapter_for_url(database_url: str) -> DatabaseAdapter:
    """Pick the adapter from a connection string's backend name."""
    return get_database_adapter(make_url(database_url).get_backend_name())
