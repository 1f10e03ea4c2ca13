from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from uuid import UUID
import structlog
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from demonight.db import advisory_xact_lock
from demonight.errors import (
    ActiveMatchConflict,
    DemoNotFound,
    InvalidMatchTransition,
    MatchNotFound,
    MatchValidationError,
)
from demonight.models.event import Demo
from demonight.models.match import Match
from demonight.models.vote import Vote
from demonight.schemas.match import MatchResult
from demonight.services.scoring import compute_match_winner

log = structlog.get_logger()


def _event_key(event_id: str) -> str:
    return f"match-event:{event_id}"


async def get_match(session: AsyncSession, match_id: UUID, *, for_update: bool = False) -> Match:
    if for_update:
        # lock the row and reload it over whatever the identity map holds
        m = await session.get(Match, match_id, with_for_update=True, populate_existing=True)
    else:
        m = await session.get(Match, match_id)
    if not m:
        raise MatchNotFound(match_id)
    return m


async def list_matches(session: AsyncSession, event_id: str) -> list[Match]:
    return (await session.execute(
        select(Match).where(Match.event_id == event_id).order_by(Match.created_at.desc())
    )).scalars().all()


async def active_match(session: AsyncSession, event_id: str) -> Match | None:
    return await session.scalar(
        select(Match).where(Match.event_id == event_id, Match.is_active.is_(True))
    )


async def create_match(
    session: AsyncSession,
    *,
    event_id: str,
    startup_a_id: UUID,
    startup_b_id: UUID,
    round_type: str | None = None,
    voting_window: int | None = None,
) -> Match:
    if startup_a_id == startup_b_id:
        raise MatchValidationError("A match needs two different demos", field="startupBId")
    if voting_window is not None and voting_window <= 0:
        raise MatchValidationError("votingWindow must be a positive number of seconds", field="votingWindow")

    for demo_id in (startup_a_id, startup_b_id):
        d = await session.get(Demo, demo_id)
        if not d or d.event_id != event_id:
            raise DemoNotFound(demo_id)

    m = Match(
        event_id=event_id,
        startup_a_id=startup_a_id,
        startup_b_id=startup_b_id,
        round_type=round_type,
        voting_window=voting_window,
        is_active=False,
    )
    session.add(m)
    await session.flush()
    await session.refresh(m)
    log.info("match_created", match_id=str(m.id), event_id=event_id, round_type=round_type)
    return m


async def start_match(session: AsyncSession, match_id: UUID) -> Match:
    """Created -> Active. Only one active match per event."""
    m = await get_match(session, match_id)
    await advisory_xact_lock(session, _event_key(m.event_id))
    m = await get_match(session, match_id, for_update=True)
    if m.status != "created":
        raise InvalidMatchTransition(m.id, m.status, "start")

    other = await active_match(session, m.event_id)
    if other is not None and other.id != m.id:
        raise ActiveMatchConflict(m.event_id, other.id)

    # Guarded update: loses cleanly to a concurrent start of the same match.
    try:
        res = await session.execute(
            update(Match)
            .where(
                Match.id == m.id,
                Match.is_active.is_(False),
                Match.start_time.is_(None),
                Match.end_time.is_(None),
            )
            .values(is_active=True, start_time=datetime.now(dt_tz.utc))
            .execution_options(synchronize_session=False)
        )
    except IntegrityError:
        # partial unique index: another match of this event went live first
        raise ActiveMatchConflict(m.event_id)
    if res.rowcount != 1:
        await session.refresh(m)
        raise InvalidMatchTransition(m.id, m.status, "start")

    await session.refresh(m)
    log.info("match_started", match_id=str(m.id), event_id=m.event_id)
    return m


async def match_result(session: AsyncSession, m: Match) -> MatchResult:
    votes = (await session.execute(select(Vote).where(Vote.match_id == m.id))).scalars().all()
    return compute_match_winner(m, votes)


async def get_results(session: AsyncSession, match_id: UUID) -> MatchResult:
    m = await get_match(session, match_id)
    return await match_result(session, m)


async def close_voting(session: AsyncSession, match_id: UUID) -> Match:
    """Active -> Closed; persists the winner computed from a fresh read of the votes."""
    m = await get_match(session, match_id, for_update=True)
    if m.status != "active":
        raise InvalidMatchTransition(m.id, m.status, "close voting on")

    result = await match_result(session, m)

    res = await session.execute(
        update(Match)
        .where(Match.id == m.id, Match.is_active.is_(True))
        .values(is_active=False, end_time=datetime.now(dt_tz.utc), winner_id=result.winner_id)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount != 1:
        await session.refresh(m)
        raise InvalidMatchTransition(m.id, m.status, "close voting on")

    await session.refresh(m)
    log.info(
        "match_closed",
        match_id=str(m.id), event_id=m.event_id,
        winner_id=str(result.winner_id) if result.winner_id else None,
        score_a=result.final_score_a, score_b=result.final_score_b,
    )
    return m


async def delete_match(session: AsyncSession, match_id: UUID) -> None:
    """Created or Closed matches only; their votes go with them."""
    m = await get_match(session, match_id, for_update=True)
    if m.status == "active":
        raise InvalidMatchTransition(m.id, m.status, "delete")
    removed = await session.execute(delete(Vote).where(Vote.match_id == m.id))
    await session.delete(m)
    await session.flush()
    log.info("match_deleted", match_id=str(match_id), votes_removed=int(removed.rowcount or 0))
