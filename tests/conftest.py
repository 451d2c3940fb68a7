"""
Shared fixtures.

Every test gets its own SQLite file database with the schema created from
the SQLModel metadata, and an app whose session dependency points at it.
"""

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from shorty.core.setting import Settings
from shorty.db import models  # noqa: F401  registers the tables
from shorty.db.adapters import get_database_adapter
from shorty.db.models import Link, LinkVisit
from shorty.db.session import get_session
from shorty.main import create_app

BASE_URL = "https://short.io"


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'shorty_test.db'}"


@pytest_asyncio.fixture
async def engine(database_url):
    engine = get_database_adapter("sqlite").create_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def test_settings(database_url) -> Settings:
    # Trailing slash checks that short_url never gets "//r/"
    return Settings(BASE_URL=BASE_URL + "/", DATABASE_URL=database_url, SENTRY_DSN="")


@pytest.fixture
def app(test_settings, session_maker):
    app = create_app(test_settings)

    async def override_get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def seed_link(session_maker):
    """Insert a link directly, bypassing the API."""
    async def _seed(original_url: str, short_name: str) -> int:
        async with session_maker() as session:
            link = Link(original_url=original_url, short_name=short_name)
            session.add(link)
            await session.commit()
            return link.id
    return _seed


@pytest.fixture
def seed_visits(session_maker):
    """Insert `count` visits for a link directly, bypassing the API."""
    async def _seed(link_id: int, count: int, ip: str = "10.0.0.1", user_agent: str = "ua") -> None:
        async with session_maker() as session:
            for _ in range(count):
                session.add(LinkVisit(link_id=link_id, ip=ip, user_agent=user_agent, status=302))
            await session.commit()
    return _seed
