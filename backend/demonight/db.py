from __future__ import annotations
from typing import AsyncGenerator
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from demonight.config import settings

class Base(DeclarativeBase):
    pass

def use_sqlite_write_transactions(eng: AsyncEngine) -> None:
    """Make every SQLite transaction take the write lock up front (BEGIN IMMEDIATE).

    The driver otherwise defers BEGIN until the first write, so two sessions
    can both read a budget total before either one writes.
    """
    @event.listens_for(eng.sync_engine, "connect")
    def _connect(dbapi_conn, _record):
        dbapi_conn.isolation_level = None  # let the "begin" hook below emit BEGIN
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    @event.listens_for(eng.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

engine = create_async_engine(settings.database_url, future=True, echo=False)
if engine.dialect.name == "sqlite":
    use_sqlite_write_transactions(engine)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session

def is_postgres(session: AsyncSession) -> bool:
    return session.get_bind().dialect.name == "postgresql"

async def advisory_xact_lock(session: AsyncSession, key: str) -> None:
    """Serialize writers on `key` until the current transaction ends.

    Postgres only. SQLite engines set up with use_sqlite_write_transactions
    already hold the database write lock for the whole transaction.
    """
    if not is_postgres(session):
        return
    await session.execute(text("SELECT pg_advisory_xact_lock(hashtext(:k))"), {"k": key})
