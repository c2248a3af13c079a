"""
Async database engine and session factory.

Uses SQLAlchemy 2.x async engine with the asyncpg driver. The engine is
built from the DATABASE_URL in DashboardSettings at application startup and
kept on app.state; there are no module-level singletons.

CHANGELOG:
- 2026-10-19: Build engine from explicit settings instead of module globals
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Args:
        database_url: Async driver URL, e.g. ``postgresql+asyncpg://...``.

    Returns:
        AsyncEngine: Configured async engine.
    """
    return create_async_engine(database_url, echo=False, pool_pre_ping=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to *engine*.

    Returns:
        async_sessionmaker: Factory for creating AsyncSession instances.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session from *factory*, closing it when the caller is done.

    Yields:
        AsyncSession: An async SQLAlchemy session.
    """
    async with factory() as session:
        yield session
