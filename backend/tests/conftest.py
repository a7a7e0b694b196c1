"""
Pytest configuration and fixtures.

Provides fixtures for:
- Database sessions on an in-memory SQLite database
- HTTP client bound to the test session
- Collectors and test settings

Data helpers for cards, sets and activity live in helpers.py.
"""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from carddex.core.config import Settings
from carddex.db.base import Base
from carddex.db.session import get_db
from carddex.main import app
from carddex.models import Collector

# Use SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite defers BEGIN, which breaks SAVEPOINT; emit it ourselves
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client sharing the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with the default progression rules and UTC dates."""
    return Settings(
        grace_days_per_week=1,
        streak_window_days=30,
        streak_lookback_days=365,
        activity_timezone="UTC",
    )


# -----------------------------------------------------------------------------
# Collector Fixtures
# -----------------------------------------------------------------------------

@pytest_asyncio.fixture
async def collector(db_session) -> Collector:
    """Create a collector with an empty collection."""
    collector = Collector(display_name="Ash")
    db_session.add(collector)
    await db_session.commit()
    await db_session.refresh(collector)
    return collector


@pytest_asyncio.fixture
async def collector_2(db_session) -> Collector:
    """Create a second collector."""
    collector = Collector(display_name="Misty")
    db_session.add(collector)
    await db_session.commit()
    await db_session.refresh(collector)
    return collector


