from __future__ import annotations
from typing import Literal
from uuid import UUID
from pydantic import Field, computed_field
from demonight.schemas.common import CamelModel

EventPhase = Literal["pre", "demos", "voting", "results", "recap"]
ALL_PHASES: tuple[EventPhase, ...] = ("pre", "demos", "voting", "results", "recap")

def display_name(phase: EventPhase, is_pitch_night: bool = False) -> str:
    if phase == "pre":
        return "Pre-Pitches" if is_pitch_night else "Pre-Demos"
    if phase == "demos":
        return "Pitches" if is_pitch_night else "Demos"
    if phase == "voting":
        return "Investing" if is_pitch_night else "Voting"
    return phase.capitalize()

class CurrentEvent(CamelModel):
    id: str
    name: str
    phase: EventPhase = "pre"
    current_demo_id: UUID | None = None
    current_award_id: UUID | None = None
    is_pitch_night: bool = False

    @computed_field(alias="phaseName")
    @property
    def phase_name(self) -> str:
        return display_name(self.phase, self.is_pitch_night)

class CurrentEventSet(CamelModel):
    event_id: str | None = Field(default=None, description="null clears the live event")

class CurrentEventStateUpdate(CamelModel):
    # Omitted fields are left untouched; explicit nulls clear the pointer.
    phase: EventPhase | None = None
    current_demo_id: UUID | None = None
    current_award_id: UUID | None = None
