"""
Alembic Migration Environment
===============================

The database URL always comes from `storefront.config.Settings` (DATABASE_URL),
never from alembic.ini, so the server and its migrations cannot drift apart.

    alembic upgrade head              # online, async engine
    alembic upgrade head --sql        # offline, prints the DDL

SQLite (used by the test suite) cannot ALTER most columns in place, so
migrations run in batch mode there. `compare_type` makes --autogenerate notice
column type changes such as a widened products.price.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from storefront.config import Settings
from storefront.database import Base

# Registers the tables on Base.metadata for --autogenerate
from storefront.models.product import Product  # noqa: F401
from storefront.models.store import Store  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def _settings() -> Settings:
    return config.attributes.get("settings") or Settings()


def _configure(settings: Settings, **kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=settings.is_sqlite,
        **kwargs,
    )


def run_migrations_offline(settings: Settings) -> None:
    _configure(
        settings,
        url=settings.database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection, settings: Settings) -> None:
    _configure(settings, connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online(settings: Settings) -> None:
    engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_sync, settings)
            await connection.commit()
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline(_settings())
else:
    asyncio.run(run_migrations_online(_settings()))
