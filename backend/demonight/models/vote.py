from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Uuid, func
from demonight.db import Base

# Allocations move in whole $1k steps. The check constraint below and migration
# 20251019_0002 carry the same number, so it is not a runtime setting.
VOTE_INCREMENT = 1000

class Vote(Base):
    """
    One ballot row from an attendee toward a demo within an award.

    Demo night: a single row per (event, attendee, award); clearing the
    selection deletes it.
    Pitch night: one row per demo the attendee invested in; `amount` holds the
    whole-dollar allocation, a multiple of 1000. Σ(amount) per
    (event, attendee, award) never exceeds the budget cap.
    Match votes carry `match_id` and a `vote_type` of audience | judge.
    """
    __tablename__ = "votes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id: Mapped[str] = mapped_column(String(64), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    attendee_id: Mapped[str] = mapped_column(String(64), ForeignKey("attendees.id", ondelete="CASCADE"), index=True, nullable=False)
    award_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("awards.id", ondelete="CASCADE"), index=True, nullable=False)
    demo_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("demos.id", ondelete="CASCADE"), index=True, nullable=True)

    amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    match_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("matches.id", ondelete="CASCADE"), index=True, nullable=True)
    vote_type: Mapped[str] = mapped_column(String(16), nullable=False, default="audience")  # audience | judge

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("event_id", "attendee_id", "award_id", "demo_id", name="uq_vote_event_attendee_award_demo"),
        CheckConstraint(f"amount IS NULL OR (amount >= 0 AND amount % {VOTE_INCREMENT} = 0)", name="ck_vote_amount_increment"),
    )
