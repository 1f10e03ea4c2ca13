from __future__ import annotations
from typing import Iterable, Protocol
from uuid import UUID

from demonight.schemas.match import MatchResult, SideTally

AUDIENCE_WEIGHT = 0.5
JUDGE_WEIGHT = 0.5


class _MatchSides(Protocol):
    id: UUID
    startup_a_id: UUID
    startup_b_id: UUID


class _Ballot(Protocol):
    demo_id: UUID | None
    vote_type: str


def _tally(votes: list[_Ballot]) -> SideTally:
    audience = sum(1 for v in votes if v.vote_type == "audience")
    judge = sum(1 for v in votes if v.vote_type == "judge")
    return SideTally(total=len(votes), audience=audience, judge=judge)


def compute_match_winner(match: _MatchSides, votes: Iterable[_Ballot]) -> MatchResult:
    """
    Weighted head-to-head result: 50% audience share + 50% judge share.

    - both classes voted: score = 0.5 * audience share + 0.5 * judge share
    - audience only: the audience share carries full weight
    - judges only: only the judge half is counted, so scores top out at 0.5
    - no votes: both 0
    Winner is the strictly higher score; equal scores give no winner.
    Pure function of the vote set, so live reads and the close-time result agree.
    """
    votes = list(votes)
    side_a = [v for v in votes if v.demo_id == match.startup_a_id]
    side_b = [v for v in votes if v.demo_id == match.startup_b_id]
    tally_a, tally_b = _tally(side_a), _tally(side_b)

    total_audience = tally_a.audience + tally_b.audience
    total_judge = tally_a.judge + tally_b.judge

    score_a = 0.0
    score_b = 0.0

    if total_audience > 0:
        score_a += (tally_a.audience / total_audience) * AUDIENCE_WEIGHT
        score_b += (tally_b.audience / total_audience) * AUDIENCE_WEIGHT

    if total_judge > 0:
        score_a += (tally_a.judge / total_judge) * JUDGE_WEIGHT
        score_b += (tally_b.judge / total_judge) * JUDGE_WEIGHT

    # No judges: audience gets the full weight.
    # TODO: confirm with organizers whether judge-only matches should be renormalized the same way.
    if total_judge == 0 and total_audience > 0:
        score_a = tally_a.audience / total_audience
        score_b = tally_b.audience / total_audience

    if score_a > score_b:
        winner_id = match.startup_a_id
    elif score_b > score_a:
        winner_id = match.startup_b_id
    else:
        winner_id = None

    return MatchResult(
        match_id=match.id,
        startup_a_id=match.startup_a_id,
        startup_b_id=match.startup_b_id,
        votes_a=tally_a,
        votes_b=tally_b,
        final_score_a=score_a,
        final_score_b=score_b,
        winner_id=winner_id,
    )
