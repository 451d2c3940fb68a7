"""Tests for database adapter selection and constraint classification."""

import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from shorty.db.adapters import ADAPTER_CLASSES, get_adapter_for_url, get_database_adapter
from shorty.db.postgres_adapter import PostgreSQLAdapter
from shorty.db.sqlite_adapter import SQLiteAdapter


class _FakePgError(Exception):
    def __init__(self, message: str, sqlstate: str):
        super().__init__(message)
        self.sqlstate = sqlstate
        self.pgcode = sqlstate


def _wrap(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT INTO links ...", {}, orig)


class TestAdapterSelection:
    """Test adapter lookup by dialect and URL."""

    def test_by_dialect(self):
        assert isinstance(get_database_adapter("sqlite"), SQLiteAdapter)
        assert isinstance(get_database_adapter("postgresql"), PostgreSQLAdapter)

    def test_by_url(self):
        assert isinstance(get_adapter_for_url("sqlite+aiosqlite:///./x.db"), SQLiteAdapter)
        assert isinstance(
            get_adapter_for_url("postgresql+asyncpg://u:p@localhost/db"), PostgreSQLAdapter
        )

    @pytest.mark.parametrize("adapter_class", ADAPTER_CLASSES)
    def test_registry_is_keyed_by_dialect_name(self, adapter_class):
        dialect_name = adapter_class().get_dialect_name()
        assert isinstance(get_database_adapter(dialect_name), adapter_class)

    def test_dialect_name_matches_engine(self):
        adapter = get_database_adapter("sqlite")
        engine = adapter.create_engine("sqlite+aiosqlite:///:memory:")
        assert engine.dialect.name == adapter.get_dialect_name()

    def test_unknown_dialect(self):
        with pytest.raises(ValueError):
            get_database_adapter("oracle")


class TestSQLiteUniqueViolation:
    """Test SQLite unique-violation detection."""

    def test_unique_violation(self):
        error = _wrap(sqlite3.IntegrityError("UNIQUE constraint failed: links.short_name"))
        assert SQLiteAdapter().is_unique_violation(error)

    def test_other_integrity_errors(self):
        adapter = SQLiteAdapter()
        assert not adapter.is_unique_violation(
            _wrap(sqlite3.IntegrityError("NOT NULL constraint failed: links.original_url"))
        )
        assert not adapter.is_unique_violation(
            _wrap(sqlite3.IntegrityError("FOREIGN KEY constraint failed"))
        )

    def test_non_integrity_error(self):
        error = OperationalError("SELECT 1", {}, sqlite3.OperationalError("database is locked"))
        assert not SQLiteAdapter().is_unique_violation(error)


class TestPostgreSQLUniqueViolation:
    """Test PostgreSQL unique-violation detection by SQLSTATE."""

    def test_unique_violation(self):
        error = _wrap(_FakePgError("duplicate key value violates unique constraint", "23505"))
        assert PostgreSQLAdapter().is_unique_violation(error)

    def test_raw_driver_error(self):
        assert PostgreSQLAdapter().is_unique_violation(_FakePgError("duplicate", "23505"))

    def test_other_sqlstates(self):
        adapter = PostgreSQLAdapter()
        assert not adapter.is_unique_violation(_wrap(_FakePgError("not null", "23502")))
        assert not adapter.is_unique_violation(_wrap(_FakePgError("fk", "23503")))
        assert not adapter.is_unique_violation(_wrap(Exception("no code at all")))
