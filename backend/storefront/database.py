"""
Storefront Backend: Database Engine and Session Management
============================================================

What:  Async SQLAlchemy engine construction, session factory, and the
       declarative base shared by all models.
How:   `create_engine_from_settings()` builds an engine with connection
       pooling; `create_session_factory()` returns an `async_sessionmaker`
       that repositories use to open one session per operation.
Who:   Called by `create_app()` at construction time and by Alembic.

Connection Pooling Strategy:
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    A listing request holds two connections at once (page query and count
    query run concurrently), so the pool must be at least twice the number
    of concurrent listing requests you expect.

    SQLite (tests only) uses the dialect's own pool; passing QueuePool sizing
    arguments to it is rejected by SQLAlchemy, so they are left out.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from storefront.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model on one metadata object, which Alembic and the
    optional `create_all` at startup both read.
    """
    pass


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the async engine described by `settings`."""
    kwargs = {
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: ORM objects stay readable after the session that
    loaded them has committed and closed, which the services rely on when
    assembling responses.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables known to `Base.metadata` that do not exist yet."""
    # Models must be imported so they register on Base.metadata
    from storefront.models import product, store  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
