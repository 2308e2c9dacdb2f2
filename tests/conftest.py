"""Shared test fixtures."""

from collections.abc import AsyncIterator

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from kids_balance_server.models.activity import Activity, ActivityCategory
from kids_balance_server.models.base import Base
from tests.factories import FAMILY_ID


@pytest.fixture
async def async_engine():
    """Create async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncIterator[AsyncSession]:
    """Create async session for testing."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest.fixture
async def reading(async_session: AsyncSession) -> Activity:
    """Educational activity worth 4 points per minute."""
    activity = Activity(
        family_id=FAMILY_ID,
        name="Reading Books",
        category=ActivityCategory.EDUCATIONAL.value,
        icon="📚",
        color="#059669",
        coefficient=4.0,
        suggested_durations=[15, 30, 60],
    )
    async_session.add(activity)
    await async_session.commit()
    return activity


@pytest.fixture
async def youtube(async_session: AsyncSession) -> Activity:
    """Screen activity worth 1 point per minute."""
    activity = Activity(
        family_id=FAMILY_ID,
        name="Watching YouTube",
        category=ActivityCategory.SCREEN.value,
        icon="📺",
        color="#FF0000",
        coefficient=1.0,
        suggested_durations=[30, 60, 120],
    )
    async_session.add(activity)
    await async_session.commit()
    return activity
