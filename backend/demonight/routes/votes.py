from __future__ import annotations
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession

from demonight.db import get_session
from demonight.auth_deps import require_admin
from demonight.errors import DemoNightError
from demonight.schemas.vote import VoteUpsert, VotePublic, BudgetSummary, DemoInvestment
from demonight.services.matches import get_match
from demonight.services.voting import (
    budget_summary,
    delete_vote,
    list_votes,
    match_votes,
    total_investments,
    upsert_vote,
)

router = APIRouter(prefix="/votes", tags=["votes"])

@router.post("", response_model=VotePublic | None)
async def upsert(payload: VoteUpsert, session: AsyncSession = Depends(get_session)):
    """
    Create, update or clear a vote. Returns null when the selection is cleared
    (demoId null) or an allocation is zeroed.
    """
    try:
        vote = await upsert_vote(
            session,
            event_id=payload.event_id,
            attendee_id=payload.attendee_id,
            award_id=payload.award_id,
            demo_id=payload.demo_id,
            amount=payload.amount,
            match_id=payload.match_id,
            vote_type=payload.vote_type,
        )
        await session.commit()
    except DemoNightError as e:
        await session.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.detail())
    return VotePublic.model_validate(vote) if vote else None

@router.get("", response_model=list[VotePublic])
async def all_votes(
    event_id: str = Query(..., alias="eventId"),
    attendee_id: str = Query(..., alias="attendeeId"),
    session: AsyncSession = Depends(get_session),
):
    return [VotePublic.model_validate(v) for v in await list_votes(session, event_id, attendee_id)]

@router.get("/match/{match_id}", response_model=list[VotePublic])
async def votes_for_match(match_id: UUID = Path(...), session: AsyncSession = Depends(get_session)):
    try:
        await get_match(session, match_id)
    except DemoNightError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())
    return [VotePublic.model_validate(v) for v in await match_votes(session, match_id)]

@router.get("/investments", response_model=list[DemoInvestment])
async def investments(
    event_id: str = Query(..., alias="eventId"),
    award_id: UUID = Query(..., alias="awardId"),
    session: AsyncSession = Depends(get_session),
):
    totals = await total_investments(session, event_id, award_id)
    rows = sorted(totals.items(), key=lambda kv: (-kv[1], str(kv[0])))
    return [DemoInvestment(demo_id=demo_id, amount=amount) for demo_id, amount in rows]

@router.get("/budget", response_model=BudgetSummary)
async def budget(
    event_id: str = Query(..., alias="eventId"),
    attendee_id: str = Query(..., alias="attendeeId"),
    award_id: UUID = Query(..., alias="awardId"),
    session: AsyncSession = Depends(get_session),
):
    return BudgetSummary(**await budget_summary(session, event_id, attendee_id, award_id))

@router.delete("/{vote_id}", status_code=204)
async def remove(
    vote_id: UUID = Path(...),
    session: AsyncSession = Depends(get_session),
    admin=Depends(require_admin),
):
    try:
        await delete_vote(session, vote_id)
        await session.commit()
    except DemoNightError as e:
        await session.rollback()
        raise HTTPException(status_code=e.status_code, detail=e.detail())
