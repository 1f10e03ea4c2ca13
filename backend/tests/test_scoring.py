import uuid
from types import SimpleNamespace

import pytest

from demonight.services.scoring import compute_match_winner

A = uuid.uuid4()
B = uuid.uuid4()


def _match(a=A, b=B):
    return SimpleNamespace(id=uuid.uuid4(), startup_a_id=a, startup_b_id=b)


def _ballots(aud_a=0, aud_b=0, judge_a=0, judge_b=0):
    votes = []
    votes += [SimpleNamespace(demo_id=A, vote_type="audience") for _ in range(aud_a)]
    votes += [SimpleNamespace(demo_id=B, vote_type="audience") for _ in range(aud_b)]
    votes += [SimpleNamespace(demo_id=A, vote_type="judge") for _ in range(judge_a)]
    votes += [SimpleNamespace(demo_id=B, vote_type="judge") for _ in range(judge_b)]
    return votes


def test_mixed_audience_and_judges():
    r = compute_match_winner(_match(), _ballots(aud_a=3, aud_b=1, judge_a=1, judge_b=2))
    assert r.final_score_a == pytest.approx(0.5 * 3 / 4 + 0.5 * 1 / 3)
    assert r.final_score_b == pytest.approx(0.5 * 1 / 4 + 0.5 * 2 / 3)
    assert round(r.final_score_a, 4) == 0.5417
    assert r.winner_id == A
    assert (r.votes_a.total, r.votes_a.audience, r.votes_a.judge) == (4, 3, 1)
    assert (r.votes_b.total, r.votes_b.audience, r.votes_b.judge) == (3, 1, 2)


def test_judges_only_is_not_renormalized():
    r = compute_match_winner(_match(), _ballots(judge_a=2))
    assert r.final_score_a == pytest.approx(0.5)
    assert r.final_score_b == 0
    assert r.winner_id == A


def test_audience_only_takes_full_weight():
    r = compute_match_winner(_match(), _ballots(aud_a=3, aud_b=1))
    assert r.final_score_a == pytest.approx(0.75)
    assert r.final_score_b == pytest.approx(0.25)
    assert r.winner_id == A


def test_no_votes_is_a_tie():
    r = compute_match_winner(_match(), [])
    assert r.final_score_a == 0 and r.final_score_b == 0
    assert r.winner_id is None
    assert r.votes_a.total == 0 and r.votes_b.total == 0


@pytest.mark.parametrize("counts", [
    dict(aud_a=2, aud_b=2),
    dict(judge_a=1, judge_b=1),
    dict(aud_a=3, aud_b=3, judge_a=2, judge_b=2),
])
def test_equal_counts_give_no_winner(counts):
    r = compute_match_winner(_match(), _ballots(**counts))
    assert r.final_score_a == pytest.approx(r.final_score_b)
    assert r.winner_id is None


@pytest.mark.parametrize("counts", [
    dict(aud_a=3, aud_b=1, judge_a=1, judge_b=2),
    dict(aud_a=0, aud_b=4, judge_a=2),
    dict(judge_a=2),
    dict(aud_a=5, aud_b=1),
])
def test_swapping_sides_swaps_scores_and_winner(counts):
    votes = _ballots(**counts)
    straight = compute_match_winner(_match(A, B), votes)
    swapped = compute_match_winner(_match(B, A), votes)
    assert swapped.final_score_a == pytest.approx(straight.final_score_b)
    assert swapped.final_score_b == pytest.approx(straight.final_score_a)
    assert swapped.winner_id == straight.winner_id


@pytest.mark.parametrize("counts", [
    dict(),
    dict(aud_b=3),
    dict(aud_a=1, aud_b=1, judge_b=2),
    dict(judge_a=1, judge_b=1),
    dict(aud_a=4, aud_b=2, judge_a=0, judge_b=3),
])
def test_one_more_audience_vote_never_lowers_score_a(counts):
    before = compute_match_winner(_match(), _ballots(**counts))
    more = dict(counts, aud_a=counts.get("aud_a", 0) + 1)
    after = compute_match_winner(_match(), _ballots(**more))
    assert after.final_score_a >= before.final_score_a


def test_votes_for_other_demos_are_ignored():
    stray = [SimpleNamespace(demo_id=uuid.uuid4(), vote_type="audience") for _ in range(5)]
    r = compute_match_winner(_match(), _ballots(aud_a=1) + stray)
    assert r.votes_a.total == 1 and r.votes_b.total == 0
    assert r.final_score_a == pytest.approx(1.0)
