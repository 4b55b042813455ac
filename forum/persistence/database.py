"""Async PostgreSQL engine and sessions."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from forum.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the engine; SQL is echoed in debug mode."""
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        # Connections can go stale behind a pooler between requests
        pool_pre_ping=True,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory for one transaction per request.

    Repositories flush explicitly and the provider commits once at the end
    of the scope. Returned models are plain pydantic objects, so nothing
    needs to be refreshed after commit.
    """
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
