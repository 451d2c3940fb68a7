"""
Database Session Management with Connection Pooling

This module handles async database connections using SQLAlchemy's async engine.
The engine is built by the adapter matching DATABASE_URL, so switching from
SQLite to PostgreSQL is a configuration change only.

Key Features:
- Database abstraction: Easy to switch between SQLite, PostgreSQL, etc.
- Connection pooling: Configured per database type
- Async session management: Proper async context management
- Error handling: Automatic rollback on exceptions
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from shorty.core.setting import settings
from shorty.db.adapters import get_adapter_for_url

db_adapter = get_adapter_for_url(settings.DATABASE_URL)

engine = db_adapter.create_engine(settings.DATABASE_URL)

async_session_maker = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    This function:
    - Creates a new async session from the pool
    - Yields it to the endpoint
    - Commits anything left pending on success
    - Rolls back on exception

    Usage in FastAPI:
        @router.get("/endpoint")
        async def endpoint(session: AsyncSession = Depends(get_session)):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
