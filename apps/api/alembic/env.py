import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from frigorifico_core import config as app_config
from frigorifico_core.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def migration_url() -> str:
    # DATABASE_URL wins over alembic.ini so migrations hit the same database as the API
    return app_config.DATABASE_URL or app_config.normalize_database_url(
        config.get_main_option("sqlalchemy.url")
    )


def _configure(**kwargs) -> None:
    context.configure(target_metadata=target_metadata, compare_type=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


def run_offline() -> None:
    _configure(url=migration_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})


def _run_sync(connection: Connection) -> None:
    # ALTERs on SQLite need batch mode
    _configure(connection=connection, render_as_batch=connection.dialect.name == "sqlite")


async def run_online() -> None:
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = migration_url()
    connectable = async_engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    try:
        async with connectable.connect() as connection:
            await connection.run_sync(_run_sync)
    finally:
        await connectable.dispose()


if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
