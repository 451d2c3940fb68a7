"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter / PostgreSQLAdapter: driver-specific implementations
- Session management: Database session creation and management
"""

from shorty.db.adapters import get_adapter_for_url, get_database_adapter
from shorty.db.interface import DatabaseAdapter
from shorty.db.session import get_session, async_session_maker, engine

__all__ = [
    "DatabaseAdapter",
    "get_adapter_for_url",
    "get_database_adapter",
    "get_session",
    "async_session_maker",
    "engine",
]
