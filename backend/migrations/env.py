from __future__ import annotations
import asyncio
from logging.config import fileConfig
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context
from demonight.config import settings
from demonight.db import Base
# register every table on Base.metadata
import demonight.models.user
import demonight.models.event
import demonight.models.match
import demonight.models.vote

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# `alembic -x db_url=... upgrade head` migrates a database other than the app's
db_url = context.get_x_argument(as_dictionary=True).get("db_url") or settings.database_url

def _configure(**kw):
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=db_url.startswith("sqlite"),
        **kw,
    )

def run_offline():
    _configure(url=db_url, literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()

def _run_sync(connection: Connection):
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()

async def run_online():
    connectable = create_async_engine(db_url, poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(_run_sync)
    await connectable.dispose()

if context.is_offline_mode():
    run_offline()
else:
    asyncio.run(run_online())
