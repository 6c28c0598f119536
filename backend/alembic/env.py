"""Alembic environment for the owners / tasks / task_ranks schema.

Invariants:
    - Every ORM model is registered on Base.metadata before autogenerate runs
    - Online migrations share the async driver the app uses (asyncpg)

Design Decisions:
    - DATABASE_URL, when set, goes through Settings so the postgresql:// rewrite
      lives in one place; otherwise alembic.ini's sqlalchemy.url is used
    - NullPool: a migration run opens one connection and exits
"""

import asyncio
import os
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from taskrank.config import Settings
from taskrank.db.base import Base
import taskrank.models  # noqa: F401  (registers tables)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _resolve_url() -> str:
    if os.environ.get("DATABASE_URL"):
        return Settings().database_url
    return config.get_main_option("sqlalchemy.url")


def _migrate(connection: Connection | None = None, url: str | None = None) -> None:
    if connection is not None:
        context.configure(connection=connection, target_metadata=target_metadata)
    else:
        context.configure(
            url=url,
            target_metadata=target_metadata,
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
        )
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _resolve_url()
    engine = async_engine_from_config(
        section, prefix="sqlalchemy.", poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _migrate(url=_resolve_url())
else:
    asyncio.run(_migrate_online())
