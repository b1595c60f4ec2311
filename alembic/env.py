import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

# =========================================================
# Alembic Config
# =========================================================
config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# =========================================================
# Import models so every table is registered on the metadata
# =========================================================
import barstock.models  # noqa: E402,F401
from barstock.core.db import DATABASE_URL, Base  # noqa: E402

config.set_main_option("sqlalchemy.url", DATABASE_URL)
target_metadata = Base.metadata


# =========================================================
# Offline migrations
# =========================================================
def run_migrations_offline() -> None:
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


# =========================================================
# Online migrations (async engine)
# =========================================================
def do_run_migrations(connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
