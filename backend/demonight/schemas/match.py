from __future__ import annotations
from typing import Literal
from uuid import UUID
from datetime import datetime
from pydantic import Field
from demonight.schemas.common import CamelModel

MatchStatus = Literal["created", "active", "closed"]

class MatchCreate(CamelModel):
    event_id: str = Field(min_length=1, max_length=64)
    startup_a_id: UUID
    startup_b_id: UUID
    round_type: str | None = Field(default=None, max_length=64)
    voting_window: int | None = Field(default=None, gt=0, description="Advisory voting duration in seconds")

class MatchPublic(CamelModel):
    id: UUID
    event_id: str
    startup_a_id: UUID
    startup_b_id: UUID
    round_type: str | None = None
    voting_window: int | None = None
    is_active: bool
    status: MatchStatus
    start_time: datetime | None = None
    end_time: datetime | None = None
    winner_id: UUID | None = None
    created_at: datetime

class SideTally(CamelModel):
    total: int = 0
    audience: int = 0
    judge: int = 0

class MatchResult(CamelModel):
    match_id: UUID
    startup_a_id: UUID
    startup_b_id: UUID
    votes_a: SideTally
    votes_b: SideTally
    final_score_a: float
    final_score_b: float
    winner_id: UUID | None = None
