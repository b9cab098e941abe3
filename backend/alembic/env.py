"""Alembic environment — async migrations for founding_members and queue_sequences.

Invariants:
    - target_metadata is Base.metadata with every model registered
      (foundingcircle.models imports them all)
    - The URL resolves exactly like the running app: Settings applies the
      postgresql:// -> postgresql+asyncpg:// rewrite, not this file
    - Online migrations use NullPool: one connection, closed when done

Design Decisions:
    - alembic.ini's sqlalchemy.url only applies when DATABASE_URL is unset
      (local docker-compose)
    - compare_type on: autogenerate notices column width changes such as
      email VARCHAR(320) and access_code VARCHAR(32)
    - SQLite (test databases) migrates in batch mode, since it cannot ALTER
      constraints in place
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from foundingcircle.config import Settings
from foundingcircle.db.base import Base
import foundingcircle.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    if os.environ.get("DATABASE_URL"):
        return Settings().database_url
    return config.get_main_option("sqlalchemy.url")


def _configure(**kwargs) -> None:
    url = kwargs.get("url") or str(kwargs["connection"].engine.url)
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=url.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of executing it."""
    _configure(
        url=_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync_migrations(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _database_url()
    engine = async_engine_from_config(
        section, prefix="sqlalchemy.", poolclass=pool.NullPool,
    )
    async with engine.connect() as connection:
        await connection.run_sync(_run_sync_migrations)
    await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
