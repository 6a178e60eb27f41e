import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

import sys
from pathlib import Path
# Make 'invoicedesk' importable when alembic runs from a source checkout.
# env.py is in backend/alembic_migrations, the package lives in backend/
BACKEND_DIR = Path(__file__).resolve().parent.parent
if str(BACKEND_DIR) not in sys.path: # Avoid adding duplicate paths
    sys.path.append(str(BACKEND_DIR))

from invoicedesk.db.base_class import Base  # SQLAlchemy declarative base
from invoicedesk.core.config import settings
# Importing the models package registers every table with Base.metadata
from invoicedesk import models  # noqa: F401

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    This configures the context with just a URL and not an Engine, so no
    DBAPI is needed. Calls to context.execute() emit the given string to the
    script output.
    """
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL is not set in application settings and is required for offline mode.")

    context.configure(
        url=str(settings.DATABASE_URL),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """
    Shared function to configure and run migrations.
    """
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations in 'online' mode against an AsyncEngine."""
    if not settings.DATABASE_URL:
        raise ValueError("DATABASE_URL is not set in the application settings (invoicedesk.core.config.settings).")

    connectable = create_async_engine(
        str(settings.DATABASE_URL),
        poolclass=pool.NullPool,    # Recommended for Alembic operations
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()

# Main Alembic entry point
if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
