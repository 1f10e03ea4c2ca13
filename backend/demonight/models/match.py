from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, DateTime, ForeignKey, Uuid, func, text
from demonight.db import Base

class Match(Base):
    """
    Head-to-head contest between two demos of one event.

    Lifecycle (never moves backward):
      created  => is_active false, start_time null
      active   => is_active true, start_time set
      closed   => is_active false, end_time set, winner_id computed (null on a tie)
    At most one active match per event (partial unique index).
    """
    __tablename__ = "matches"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id: Mapped[str] = mapped_column(String(64), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    startup_a_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("demos.id", ondelete="CASCADE"), nullable=False)
    startup_b_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("demos.id", ondelete="CASCADE"), nullable=False)

    round_type: Mapped[str | None] = mapped_column(String(64))  # e.g. "Semi-Final"
    voting_window: Mapped[int | None] = mapped_column(Integer)  # seconds, advisory only

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    winner_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("demos.id", ondelete="SET NULL"))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("startup_a_id <> startup_b_id", name="ck_match_distinct_sides"),
        Index(
            "uq_matches_one_active_per_event",
            "event_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    @property
    def status(self) -> str:
        if self.is_active:
            return "active"
        if self.end_time is not None:
            return "closed"
        return "created"
