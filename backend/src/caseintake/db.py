"""Database connection management for the case intake service.

Engines and session factories are created explicitly and handed to the
components that need them; nothing here keeps a module-level handle.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import MetaData, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from .config import Settings, get_settings

# Naming convention for constraints (improves migration compatibility)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    metadata = MetaData(naming_convention=convention)


SessionFactory = async_sessionmaker[AsyncSession]


def create_engine(settings: Settings | None = None, url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Args:
        settings: Settings to read the URL and debug flag from
        url: Explicit database URL, overriding settings

    Returns:
        A new AsyncEngine
    """
    settings = settings or get_settings()
    database_url = url or settings.database_url

    kwargs: dict = {"echo": settings.api_debug, "pool_pre_ping": True}
    if make_url(database_url).get_backend_name() != "sqlite":
        kwargs.update(pool_size=10, max_overflow=20)

    return create_async_engine(database_url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> SessionFactory:
    """Create the async session factory bound to an engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def session_scope(factory: SessionFactory) -> AsyncGenerator[AsyncSession, None]:
    """Open a session that commits on success and rolls back on error.

    Usage:
        async with session_scope(factory) as session:
            result = await session.execute(query)
    """
    session = factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet (development and tests)."""
    # Import for the side effect of registering tables on Base.metadata
    from .cases import tables  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping(factory: SessionFactory) -> None:
    """Run a trivial query to verify connectivity."""
    async with session_scope(factory) as session:
        await session.execute(text("SELECT 1"))
