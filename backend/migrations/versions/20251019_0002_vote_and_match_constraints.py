"""Budget and match lifecycle hardening - constraints and indexes

Revision ID: 20251019_0002
Revises: 20251019_0001
"""
from alembic import op


# revision identifiers, used by Alembic.
revision = "20251019_0002"
down_revision = "20251019_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Allocations are whole $1k steps
    op.execute("""
        ALTER TABLE votes
        ADD CONSTRAINT ck_vote_amount_increment
        CHECK (amount IS NULL OR (amount >= 0 AND amount % 1000 = 0))
    """)

    op.execute("""
        ALTER TABLE matches
        ADD CONSTRAINT ck_match_distinct_sides
        CHECK (startup_a_id <> startup_b_id)
    """)

    # At most one live match per event
    op.execute("""
        CREATE UNIQUE INDEX uq_matches_one_active_per_event
        ON matches (event_id) WHERE is_active
    """)


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS uq_matches_one_active_per_event")
    op.execute("ALTER TABLE matches DROP CONSTRAINT IF EXISTS ck_match_distinct_sides")
    op.execute("ALTER TABLE votes DROP CONSTRAINT IF EXISTS ck_vote_amount_increment")
