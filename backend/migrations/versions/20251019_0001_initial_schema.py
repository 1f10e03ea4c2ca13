from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "20251019_0001"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("username", sa.String(20), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "events",
        sa.Column("id", sa.String(64), primary_key=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("url", sa.String(500), nullable=True),
        sa.Column("config", postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )

    op.create_table(
        "attendees",
        sa.Column("id", sa.String(64), primary_key=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("type", sa.String(32), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )

    op.create_table(
        "event_attendees",
        sa.Column("event_id", sa.String(64), sa.ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("attendee_id", sa.String(64), sa.ForeignKey("attendees.id", ondelete="CASCADE"), primary_key=True),
    )

    for table in ("demos", "awards"):
        cols = [
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column("event_id", sa.String(64), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
            sa.Column("index", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("name", sa.String(200), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("votable", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        ]
        if table == "demos":
            cols.append(sa.Column("url", sa.String(500), nullable=True))
        op.create_table(table, *cols)
        op.create_index(f"ix_{table}_event_id", table, ["event_id"])

    op.create_table(
        "matches",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("event_id", sa.String(64), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("startup_a_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("demos.id", ondelete="CASCADE"), nullable=False),
        sa.Column("startup_b_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("demos.id", ondelete="CASCADE"), nullable=False),
        sa.Column("round_type", sa.String(64), nullable=True),
        sa.Column("voting_window", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("start_time", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("end_time", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("winner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("demos.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    op.create_index("ix_matches_event_id", "matches", ["event_id"])

    op.create_table(
        "votes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("event_id", sa.String(64), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("attendee_id", sa.String(64), sa.ForeignKey("attendees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("award_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("awards.id", ondelete="CASCADE"), nullable=False),
        sa.Column("demo_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("demos.id", ondelete="CASCADE"), nullable=True),
        sa.Column("amount", sa.Integer(), nullable=True),
        sa.Column("match_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("matches.id", ondelete="CASCADE"), nullable=True),
        sa.Column("vote_type", sa.String(16), nullable=False, server_default="audience"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
    )
    for col in ("event_id", "attendee_id", "award_id", "demo_id", "match_id"):
        op.create_index(f"ix_votes_{col}", "votes", [col])
    op.create_unique_constraint(
        "uq_vote_event_attendee_award_demo", "votes", ["event_id", "attendee_id", "award_id", "demo_id"]
    )

def downgrade() -> None:
    op.drop_table("votes")
    op.drop_index("ix_matches_event_id", table_name="matches")
    op.drop_table("matches")
    for table in ("awards", "demos"):
        op.drop_index(f"ix_{table}_event_id", table_name=table)
        op.drop_table(table)
    op.drop_table("event_attendees")
    op.drop_table("attendees")
    op.drop_table("events")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
