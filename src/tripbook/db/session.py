from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from tripbook.config import Settings, settings

# Constraint naming conventions, kept identical to the hosted schema so that
# metadata.create_all (tests) produces the same names as production.
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    The tables are owned by the hosted backend; these models only describe
    what we read.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def build_engine(config: Settings) -> AsyncEngine:
    """Create the async engine for ``config.database_url``.

    Pool tuning and asyncpg's command timeout only apply to the Postgres driver.
    """
    url = make_url(config.database_url)
    options: dict[str, Any] = {"echo": config.db_echo}
    if url.get_backend_name() == "postgresql":
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_timeout=config.db_pool_timeout,
            pool_recycle=config.db_pool_recycle,
            pool_pre_ping=config.db_pool_pre_ping,
        )
        if url.get_driver_name() == "asyncpg":
            options["connect_args"] = {"command_timeout": config.db_statement_timeout}
    return create_async_engine(url, **options)


engine = build_engine(settings)

# expire_on_commit=False keeps loaded rows usable after the session ends;
# accessing expired attributes would otherwise trigger sync I/O.
async_session = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides a read session per request.

    Everything here is read-only, but the session still rolls back on error
    so a failed query never leaves a transaction open on the pooled connection.
    """
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def shutdown() -> None:
    """Close all pooled connections. Called from the app lifespan on shutdown."""
    await engine.dispose()
