from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import JSON, Boolean, Column, String, Integer, DateTime, ForeignKey, Table, Text, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from demonight.db import Base

event_attendees = Table(
    "event_attendees",
    Base.metadata,
    Column("event_id", String(64), ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("attendee_id", String(64), ForeignKey("attendees.id", ondelete="CASCADE"), primary_key=True),
)

class Event(Base):
    __tablename__ = "events"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # organizer-chosen slug, e.g. "sf-demo"
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    url: Mapped[str | None] = mapped_column(String(500))
    config: Mapped[dict] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    attendees: Mapped[list["Attendee"]] = relationship(secondary=event_attendees, back_populates="events")

    @property
    def is_pitch_night(self) -> bool:
        return bool((self.config or {}).get("isPitchNight", False))

class Attendee(Base):
    __tablename__ = "attendees"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # generated client-side
    name: Mapped[str | None] = mapped_column(String(200))
    email: Mapped[str | None] = mapped_column(String(320))
    type: Mapped[str | None] = mapped_column(String(32))  # Founder | Investor | ...
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    events: Mapped[list[Event]] = relationship(secondary=event_attendees, back_populates="attendees")

class Demo(Base):
    __tablename__ = "demos"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id: Mapped[str] = mapped_column(String(64), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text())
    url: Mapped[str | None] = mapped_column(String(500))
    votable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

class Award(Base):
    __tablename__ = "awards"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id: Mapped[str] = mapped_column(String(64), ForeignKey("events.id", ondelete="CASCADE"), index=True, nullable=False)
    index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text())
    votable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

