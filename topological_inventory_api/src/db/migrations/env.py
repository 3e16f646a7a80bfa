from __future__ import annotations

import asyncio
import sys
from pathlib import Path

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

# Ensure the project root is on sys.path so `src.*` imports work when running Alembic
CURRENT_FILE = Path(__file__).resolve()
PROJECT_ROOT = CURRENT_FILE.parents[3]  # .../topological_inventory_api
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.db import models  # noqa: E402,F401  registers the tables on Base.metadata
from src.db.base import Base  # noqa: E402
from src.db.config import get_settings  # noqa: E402

config = context.config

settings = get_settings()
target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        # SQLite cannot ALTER most constraints in place
        render_as_batch=settings.async_database_url.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    """
    Emit the migration SQL for the configured URL without connecting.
    """
    _configure(
        url=config.get_main_option("sqlalchemy.url") or settings.sync_database_url,
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
    """
    Apply migrations over an async engine built from the database settings.
    """
    connectable: AsyncEngine = create_async_engine(
        settings.async_database_url,
        poolclass=pool.NullPool,
        echo=settings.SQL_ECHO,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(_run_sync_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
