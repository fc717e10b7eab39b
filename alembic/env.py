import asyncio
from logging.config import fileConfig

from sqlalchemy.engine import Connection

from alembic import context

from jobtracker.core.config import settings
from jobtracker.core.database import Base, engine as app_engine

# Import all models to ensure they are registered in Base.metadata
from jobtracker.jobs import database  # noqa
from jobtracker.reporting import database as reporting_db  # noqa
from jobtracker.sharing import database as sharing_db  # noqa

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_url():
    return settings.database_url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode: emit SQL from the URL alone."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run against the app's async engine."""
    async with app_engine.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await app_engine.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
