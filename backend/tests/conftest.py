from __future__ import annotations
import os
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

# Set before any demonight import builds the module-level engine.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from demonight.db import Base, get_session, use_sqlite_write_transactions
from demonight.main import app
from demonight.models.event import Attendee, Award, Demo, Event
from demonight.models.match import Match  # noqa: F401  registers the table
from demonight.models.user import User
from demonight.models.vote import Vote  # noqa: F401
from demonight.security import make_access_token
from demonight.services.current_event import CurrentEventStore, get_current_event_store


class InMemoryRedis:
    """The three Redis calls CurrentEventStore makes, backed by a dict."""

    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = value
        return True

    async def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0


@pytest_asyncio.fixture()
async def engine(tmp_path):
    db_file = tmp_path / "test.sqlite3"
    eng = create_async_engine(f"sqlite+aiosqlite:///{db_file}", future=True)
    if eng.url.get_backend_name() != "sqlite":
        raise RuntimeError("Test database must be SQLite")
    use_sqlite_write_transactions(eng)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture()
def sessionmaker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture()
async def session(sessionmaker):
    async with sessionmaker() as s:
        yield s


@pytest.fixture()
def redis():
    return InMemoryRedis()


@pytest.fixture()
def store(redis):
    return CurrentEventStore(redis)


@pytest_asyncio.fixture()
async def client(sessionmaker, store):
    async def _session():
        async with sessionmaker() as s:
            yield s

    async def _store():
        return store

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_current_event_store] = _store
    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _make_user(session, *, is_admin: bool) -> User:
    u = User(
        email=f"u-{uuid.uuid4().hex[:8]}@example.com",
        username=f"u_{uuid.uuid4().hex[:8]}",
        password_hash="not-a-real-hash",
        is_admin=is_admin,
    )
    session.add(u)
    await session.commit()
    return u


@pytest_asyncio.fixture()
async def admin_headers(session):
    u = await _make_user(session, is_admin=True)
    return {"Authorization": f"Bearer {make_access_token(str(u.id))}"}


@pytest_asyncio.fixture()
async def user_headers(session):
    u = await _make_user(session, is_admin=False)
    return {"Authorization": f"Bearer {make_access_token(str(u.id))}"}


async def make_event(session, *, pitch_night: bool = True, n_demos: int = 3, n_attendees: int = 2) -> SimpleNamespace:
    attendees = [Attendee(id=f"att-{uuid.uuid4().hex[:10]}", name=f"Attendee {i}") for i in range(n_attendees)]
    ev = Event(
        id=f"ev-{uuid.uuid4().hex[:8]}",
        name="SF Demo Night",
        date=datetime(2025, 10, 1, 18, 0, tzinfo=timezone.utc),
        url="https://example.com/sf",
        config={"isPitchNight": pitch_night},
        attendees=attendees,
    )
    session.add(ev)
    await session.flush()
    demos = [Demo(event_id=ev.id, index=i, name=f"Demo {i}") for i in range(n_demos)]
    award = Award(event_id=ev.id, index=0, name="Crowd Favorite")
    other_award = Award(event_id=ev.id, index=1, name="Best Technology")
    session.add_all([*demos, award, other_award])
    await session.commit()
    # Plain ids: they stay readable after a test rolls the session back.
    return SimpleNamespace(
        event_id=ev.id,
        demo_ids=[d.id for d in demos],
        award_id=award.id,
        other_award_id=other_award.id,
        attendee_ids=[a.id for a in attendees],
        attendee_id=attendees[0].id,
    )


@pytest_asyncio.fixture()
async def seeded(session):
    return await make_event(session)
