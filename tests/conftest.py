import os
from collections.abc import AsyncIterator
from datetime import date

# Point the app's own engine at SQLite before tripbook is imported; every
# request in tests goes through the overridden get_db below anyway.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Registers every table on Base.metadata.
import tripbook.models  # noqa: F401
from tripbook.db.session import Base, get_db
from tripbook.dependencies import get_today
from tripbook.main import app

# Pytest only picks up fixtures from conftest.py files; seed fixtures live in
# tests/seeds.py and are registered as a plugin instead.
pytest_plugins = ["tests.seeds"]

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Monday 2 March 2026. Every API test evaluates pricing rules against this day.
TODAY = date(2026, 3, 2)


@pytest_asyncio.fixture
async def db() -> AsyncIterator[AsyncSession]:
    """Fresh in-memory database per test with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(engine, expire_on_commit=False)
    async with async_session() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the test session, with "today" pinned to TODAY."""

    async def override_get_db() -> AsyncIterator[AsyncSession]:
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
