from __future__ import annotations
from uuid import UUID
import structlog
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from demonight.config import settings
from demonight.db import advisory_xact_lock
from demonight.errors import (
    AttendeeNotFound,
    AwardNotFound,
    BudgetExceeded,
    DemoNotFound,
    DuplicateVote,
    EventNotFound,
    MatchNotOpen,
    VoteNotFound,
    VoteValidationError,
)
from demonight.models.event import Attendee, Award, Demo, Event
from demonight.models.vote import VOTE_INCREMENT, Vote
from demonight.services.matches import get_match

log = structlog.get_logger()

UNIQUE_VOTE = "uq_vote_event_attendee_award_demo"


def validate_amount(amount) -> None:
    """Reject anything but None or a non-negative whole multiple of the increment."""
    if amount is None:
        return
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise VoteValidationError("Investment amount must be a whole number of dollars", field="amount")
    if amount < 0:
        raise VoteValidationError("Investment amount cannot be negative", field="amount")
    if amount % VOTE_INCREMENT != 0:
        raise VoteValidationError(
            f"Investment amount must be in ${VOTE_INCREMENT // 1000}k increments", field="amount"
        )


def _partition_key(event_id: str, attendee_id: str, award_id: UUID) -> str:
    return f"vote-budget:{event_id}:{attendee_id}:{award_id}"


async def allocated_total(
    session: AsyncSession,
    event_id: str,
    attendee_id: str,
    award_id: UUID,
    *,
    exclude_demo_id: UUID | None = None,
) -> int:
    q = select(func.coalesce(func.sum(Vote.amount), 0)).where(
        Vote.event_id == event_id,
        Vote.attendee_id == attendee_id,
        Vote.award_id == award_id,
    )
    if exclude_demo_id is not None:
        # rows with a null demo never hold an amount worth counting twice
        q = q.where((Vote.demo_id != exclude_demo_id) | Vote.demo_id.is_(None))
    return int(await session.scalar(q) or 0)


async def clear_votes(session: AsyncSession, event_id: str, attendee_id: str, award_id: UUID) -> int:
    """Remove the attendee's selection(s) for one award. No rows is a no-op."""
    res = await session.execute(
        delete(Vote).where(
            Vote.event_id == event_id,
            Vote.attendee_id == attendee_id,
            Vote.award_id == award_id,
        )
    )
    return int(res.rowcount or 0)


def _is_unique_vote_violation(exc: IntegrityError) -> bool:
    # Postgres names the constraint; SQLite lists the columns instead
    msg = str(exc.orig)
    return UNIQUE_VOTE in msg or "UNIQUE constraint failed: votes." in msg


async def _load_ballot_targets(
    session: AsyncSession, event_id: str, attendee_id: str, award_id: UUID
) -> Event:
    ev = await session.get(Event, event_id)
    if not ev:
        raise EventNotFound(event_id)
    if not await session.get(Attendee, attendee_id):
        raise AttendeeNotFound(attendee_id)
    award = await session.get(Award, award_id)
    if not award:
        raise AwardNotFound(award_id)
    if award.event_id != event_id:
        raise VoteValidationError("Award belongs to a different event", field="awardId")
    return ev


async def upsert_vote(
    session: AsyncSession,
    *,
    event_id: str,
    attendee_id: str,
    award_id: UUID,
    demo_id: UUID | None,
    amount: int | None = None,
    match_id: UUID | None = None,
    vote_type: str = "audience",
) -> Vote | None:
    """
    Set the attendee's vote (or allocation) for one demo within one award.

    Returns the stored row, or None when the selection was cleared (demo_id is
    None) or the allocation zeroed. Read-validate-write runs under a lock on the
    (event, attendee, award) partition, so concurrent allocations to different
    demos cannot overspend the budget. Caller commits.
    """
    validate_amount(amount)
    if vote_type not in ("audience", "judge"):
        raise VoteValidationError("voteType must be audience or judge", field="voteType")

    if demo_id is None:
        n = await clear_votes(session, event_id, attendee_id, award_id)
        log.info("vote_cleared", event_id=event_id, attendee_id=attendee_id, award_id=str(award_id), removed=n)
        return None

    await advisory_xact_lock(session, _partition_key(event_id, attendee_id, award_id))
    ev = await _load_ballot_targets(session, event_id, attendee_id, award_id)

    if match_id is not None:
        m = await get_match(session, match_id)
        if m.event_id != event_id:
            raise VoteValidationError("Match belongs to a different event", field="matchId")
        if not m.is_active:
            raise MatchNotOpen(m.id, m.status)
        if demo_id not in (m.startup_a_id, m.startup_b_id):
            raise VoteValidationError("Demo is not part of this match", field="demoId")

    demo = await session.get(Demo, demo_id)
    if not demo:
        raise DemoNotFound(demo_id)
    if demo.event_id != event_id:
        raise VoteValidationError("Demo belongs to a different event", field="demoId")

    existing = await session.scalar(
        select(Vote).where(
            Vote.event_id == event_id,
            Vote.attendee_id == attendee_id,
            Vote.award_id == award_id,
            Vote.demo_id == demo_id,
        )
    )
    # a row never moves into or out of a match tally
    if existing is not None and existing.match_id != match_id:
        raise VoteValidationError(
            "This demo already holds a different kind of vote for this award; clear it first",
            field="matchId",
        )

    if match_id is not None:
        # One ballot per attendee per match: switching sides drops the old one.
        await session.execute(
            delete(Vote).where(
                Vote.match_id == match_id,
                Vote.attendee_id == attendee_id,
                Vote.demo_id != demo_id,
            )
        )
    elif not ev.is_pitch_night:
        # Demo night: one pick per award, so a new pick replaces the old one.
        await session.execute(
            delete(Vote).where(
                Vote.event_id == event_id,
                Vote.attendee_id == attendee_id,
                Vote.award_id == award_id,
                Vote.match_id.is_(None),
                Vote.demo_id != demo_id,
            )
        )

    if amount is not None:
        total = await allocated_total(session, event_id, attendee_id, award_id, exclude_demo_id=demo_id)
        cap = settings.vote_budget_cap
        if total + amount > cap:
            log.warning(
                "budget_exceeded",
                event_id=event_id, attendee_id=attendee_id, award_id=str(award_id),
                allocated=total, requested=amount,
            )
            raise BudgetExceeded(remaining=cap - total, requested=amount, cap=cap)

    if amount == 0:
        if existing:
            await session.delete(existing)
            await session.flush()
        log.info("vote_zeroed", event_id=event_id, attendee_id=attendee_id, award_id=str(award_id), demo_id=str(demo_id))
        return None

    if existing:
        existing.amount = amount
        existing.vote_type = vote_type
        vote = existing
    else:
        vote = Vote(
            event_id=event_id,
            attendee_id=attendee_id,
            award_id=award_id,
            demo_id=demo_id,
            amount=amount,
            match_id=match_id,
            vote_type=vote_type,
        )
        session.add(vote)

    try:
        await session.flush()
    except IntegrityError as e:
        if not _is_unique_vote_violation(e):
            raise
        log.warning("vote_duplicate", event_id=event_id, attendee_id=attendee_id, award_id=str(award_id), demo_id=str(demo_id))
        raise DuplicateVote()

    await session.refresh(vote)
    log.info(
        "vote_upserted",
        vote_id=str(vote.id), event_id=event_id, attendee_id=attendee_id, award_id=str(award_id),
        demo_id=str(demo_id), amount=amount, match_id=str(match_id) if match_id else None, vote_type=vote_type,
    )
    return vote


async def list_votes(session: AsyncSession, event_id: str, attendee_id: str) -> list[Vote]:
    return (await session.execute(
        select(Vote)
        .where(Vote.event_id == event_id, Vote.attendee_id == attendee_id)
        .order_by(Vote.created_at.asc())
    )).scalars().all()


async def match_votes(session: AsyncSession, match_id: UUID) -> list[Vote]:
    return (await session.execute(
        select(Vote).where(Vote.match_id == match_id).order_by(Vote.created_at.asc())
    )).scalars().all()


async def total_investments(session: AsyncSession, event_id: str, award_id: UUID) -> dict[UUID, int]:
    """Σ(amount) per demo for one award, skipping empty allocations."""
    rows = (await session.execute(
        select(Vote.demo_id, func.sum(Vote.amount))
        .where(
            Vote.event_id == event_id,
            Vote.award_id == award_id,
            Vote.demo_id.is_not(None),
            Vote.amount.is_not(None),
            Vote.amount > 0,
        )
        .group_by(Vote.demo_id)
    )).all()
    return {demo_id: int(total) for (demo_id, total) in rows}


async def budget_summary(session: AsyncSession, event_id: str, attendee_id: str, award_id: UUID) -> dict:
    allocated = await allocated_total(session, event_id, attendee_id, award_id)
    cap = settings.vote_budget_cap
    return {
        "event_id": event_id,
        "attendee_id": attendee_id,
        "award_id": award_id,
        "cap": cap,
        "allocated": allocated,
        "remaining": max(0, cap - allocated),
    }


async def delete_vote(session: AsyncSession, vote_id: UUID) -> None:
    v = await session.get(Vote, vote_id)
    if not v:
        raise VoteNotFound(vote_id)
    await session.delete(v)
    await session.flush()
    log.info("vote_deleted", vote_id=str(vote_id))
