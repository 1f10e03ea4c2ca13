from __future__ import annotations
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession

from demonight.db import get_session
from demonight.auth_deps import require_admin
from demonight.errors import DemoNightError
from demonight.schemas.match import MatchCreate, MatchPublic, MatchResult
from demonight.services import matches as svc

router = APIRouter(prefix="/matches", tags=["matches"])

def _http(e: DemoNightError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.detail())

@router.get("", response_model=list[MatchPublic])
async def all_matches(event_id: str = Query(..., alias="eventId"), session: AsyncSession = Depends(get_session)):
    return [MatchPublic.model_validate(m) for m in await svc.list_matches(session, event_id)]

@router.get("/active", response_model=MatchPublic | None)
async def get_active(event_id: str = Query(..., alias="eventId"), session: AsyncSession = Depends(get_session)):
    m = await svc.active_match(session, event_id)
    return MatchPublic.model_validate(m) if m else None

@router.post("", response_model=MatchPublic, status_code=201)
async def create(payload: MatchCreate, session: AsyncSession = Depends(get_session), admin=Depends(require_admin)):
    try:
        m = await svc.create_match(
            session,
            event_id=payload.event_id,
            startup_a_id=payload.startup_a_id,
            startup_b_id=payload.startup_b_id,
            round_type=payload.round_type,
            voting_window=payload.voting_window,
        )
        await session.commit()
    except DemoNightError as e:
        await session.rollback()
        raise _http(e)
    return MatchPublic.model_validate(m)

@router.get("/{match_id}", response_model=MatchPublic)
async def get(match_id: UUID = Path(...), session: AsyncSession = Depends(get_session)):
    try:
        return MatchPublic.model_validate(await svc.get_match(session, match_id))
    except DemoNightError as e:
        raise _http(e)

@router.post("/{match_id}/start", response_model=MatchPublic)
async def start(match_id: UUID = Path(...), session: AsyncSession = Depends(get_session), admin=Depends(require_admin)):
    try:
        m = await svc.start_match(session, match_id)
        await session.commit()
    except DemoNightError as e:
        await session.rollback()
        raise _http(e)
    return MatchPublic.model_validate(m)

@router.post("/{match_id}/close", response_model=MatchPublic)
async def close_voting(match_id: UUID = Path(...), session: AsyncSession = Depends(get_session), admin=Depends(require_admin)):
    try:
        m = await svc.close_voting(session, match_id)
        await session.commit()
    except DemoNightError as e:
        await session.rollback()
        raise _http(e)
    return MatchPublic.model_validate(m)

@router.get("/{match_id}/results", response_model=MatchResult)
async def results(match_id: UUID = Path(...), session: AsyncSession = Depends(get_session)):
    # polled every couple of seconds by the live screen; always recomputed
    try:
        return await svc.get_results(session, match_id)
    except DemoNightError as e:
        raise _http(e)

@router.delete("/{match_id}", status_code=204)
async def remove(match_id: UUID = Path(...), session: AsyncSession = Depends(get_session), admin=Depends(require_admin)):
    try:
        await svc.delete_match(session, match_id)
        await session.commit()
    except DemoNightError as e:
        await session.rollback()
        raise _http(e)
