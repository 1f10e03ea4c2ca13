from __future__ import annotations
from typing import Literal
from uuid import UUID
from datetime import datetime
from pydantic import Field
from demonight.schemas.common import CamelModel

VoteType = Literal["audience", "judge"]

class VoteUpsert(CamelModel):
    event_id: str = Field(min_length=1, max_length=64)
    attendee_id: str = Field(min_length=1, max_length=64)
    award_id: UUID
    demo_id: UUID | None  # null clears the attendee's selection for the award
    amount: int | None = None  # whole dollars, multiple of 1000
    match_id: UUID | None = None
    vote_type: VoteType = "audience"

class VotePublic(CamelModel):
    id: UUID
    event_id: str
    attendee_id: str
    award_id: UUID
    demo_id: UUID | None
    amount: int | None = None
    match_id: UUID | None = None
    vote_type: VoteType
    created_at: datetime
    updated_at: datetime

class BudgetSummary(CamelModel):
    event_id: str
    attendee_id: str
    award_id: UUID
    cap: int
    allocated: int
    remaining: int

class DemoInvestment(CamelModel):
    demo_id: UUID
    amount: int
