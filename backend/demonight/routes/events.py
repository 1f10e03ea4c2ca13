from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from demonight.db import get_session
from demonight.auth_deps import require_admin
from demonight.errors import DemoNightError
from demonight.schemas.event import CurrentEvent, CurrentEventSet, CurrentEventStateUpdate
from demonight.services.current_event import CurrentEventStore, get_current_event_store, set_current_event

router = APIRouter(prefix="/events", tags=["events"])

@router.get("/current", response_model=CurrentEvent | None)
async def get_current(store: CurrentEventStore = Depends(get_current_event_store)):
    return await store.get()

@router.put("/current", response_model=CurrentEvent | None)
async def update_current(
    payload: CurrentEventSet,
    session: AsyncSession = Depends(get_session),
    store: CurrentEventStore = Depends(get_current_event_store),
    admin=Depends(require_admin),
):
    try:
        return await set_current_event(session, store, payload.event_id)
    except DemoNightError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())

@router.patch("/current/state", response_model=CurrentEvent)
async def update_current_state(
    payload: CurrentEventStateUpdate,
    store: CurrentEventStore = Depends(get_current_event_store),
    admin=Depends(require_admin),
):
    try:
        return await store.update_state(payload.model_dump(exclude_unset=True))
    except DemoNightError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail())
