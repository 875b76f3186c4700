import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context
from sqlmodel import SQLModel

from app.core.config import settings
from app.core.database import engine_options, is_sqlite
import app.models  # noqa: F401  (register hazard, tracker and worker tables)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata

# `alembic -x db_url=...` migrates another database than the app's own
DATABASE_URL = context.get_x_argument(as_dictionary=True).get("db_url", settings.DATABASE_URL)


def configure_context(**kwargs):
    # SQLite cannot ALTER columns in place, so tracker column changes need batch mode
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=is_sqlite(DATABASE_URL),
        **kwargs,
    )


def run_migrations_offline():
    configure_context(
        url=DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection):
    configure_context(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online():
    options = engine_options(DATABASE_URL)
    options.pop("pool_pre_ping", None)
    connectable = create_async_engine(DATABASE_URL, poolclass=pool.NullPool, **options)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
