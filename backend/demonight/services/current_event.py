from __future__ import annotations
from functools import lru_cache
from typing import Any
import structlog
from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from demonight.config import settings
from demonight.errors import EventNotFound, NoCurrentEvent
from demonight.models.event import Event
from demonight.schemas.event import ALL_PHASES, CurrentEvent

log = structlog.get_logger()


class CurrentEventStore:
    """
    The live event shared by every API instance, kept in Redis under one key.
    Read it once per request; never cache it in the process.
    """

    def __init__(self, redis: Redis, key: str = settings.current_event_key):
        self.redis = redis
        self.key = key

    async def get(self) -> CurrentEvent | None:
        raw = await self.redis.get(self.key)
        if not raw:
            return None
        # Older payloads predate isPitchNight; the model default fills it in.
        return CurrentEvent.model_validate_json(raw)

    async def _put(self, ev: CurrentEvent) -> CurrentEvent:
        await self.redis.set(self.key, ev.model_dump_json(by_alias=True))
        return ev

    async def set(self, event: Event | None) -> CurrentEvent | None:
        if event is None:
            await self.redis.delete(self.key)
            log.info("current_event_cleared")
            return None
        current = await self.get()
        if current and current.id == event.id:
            return current
        ev = CurrentEvent(id=event.id, name=event.name, phase="pre", is_pitch_night=event.is_pitch_night)
        log.info("current_event_set", event_id=event.id, is_pitch_night=ev.is_pitch_night)
        return await self._put(ev)

    async def update_state(self, changes: dict[str, Any]) -> CurrentEvent:
        """Apply phase / currentDemoId / currentAwardId; keys absent from `changes` stay as they are."""
        current = await self.get()
        if current is None:
            raise NoCurrentEvent()
        if changes.get("phase") is not None:
            if changes["phase"] not in ALL_PHASES:
                raise ValueError(f"unknown phase {changes['phase']!r}")
            current.phase = changes["phase"]
        if "current_demo_id" in changes:
            current.current_demo_id = changes["current_demo_id"]
        if "current_award_id" in changes:
            current.current_award_id = changes["current_award_id"]
        log.info("current_event_state", event_id=current.id, phase=current.phase)
        return await self._put(current)


async def set_current_event(session: AsyncSession, store: CurrentEventStore, event_id: str | None) -> CurrentEvent | None:
    if not event_id:
        return await store.set(None)
    ev = await session.get(Event, event_id)
    if not ev:
        raise EventNotFound(event_id)
    return await store.set(ev)


@lru_cache
def get_redis() -> Redis:
    return Redis.from_url(settings.redis_url, decode_responses=True)


async def get_current_event_store(redis: Redis = Depends(get_redis)) -> CurrentEventStore:
    return CurrentEventStore(redis)
