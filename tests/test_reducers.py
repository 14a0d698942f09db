"""Tests for the two max rules."""

from __future__ import annotations

from datetime import date

from snowday.forecasting.base import NO_SCORE, AftermathCandidate, DayScore
from snowday.forecasting.reducers import choose_score, strongest_event


def _candidate(days_since: int, closure: float) -> AftermathCandidate:
    return AftermathCandidate(
        event_date=date(2025, 1, 10 - days_since),
        days_since=days_since,
        closure=closure,
        is_ice_event=False,
        effective_amount=3.0,
    )


class TestStrongestEvent:
    def test_empty(self):
        assert strongest_event([]) is None

    def test_max_closure(self):
        best = strongest_event([_candidate(1, 40.0), _candidate(3, 72.5), _candidate(2, 60.0)])
        assert best.closure == 72.5

    def test_tie_goes_to_most_recent(self):
        best = strongest_event([_candidate(3, 50.0), _candidate(1, 50.0), _candidate(2, 50.0)])
        assert best.days_since == 1

    def test_order_independent(self):
        candidates = [_candidate(1, 20.0), _candidate(2, 80.0), _candidate(4, 10.0)]
        assert strongest_event(candidates) == strongest_event(list(reversed(candidates)))


class TestChooseScore:
    def test_aftermath_wins_when_higher(self):
        direct = DayScore(closure=10, delay=20)
        aftermath = DayScore(closure=60, delay=45, is_aftermath=True, days_since_event=1)
        assert choose_score(direct, aftermath) is aftermath

    def test_direct_wins_ties(self):
        direct = DayScore(closure=60, delay=40)
        aftermath = DayScore(closure=60, delay=10, is_aftermath=True, days_since_event=2)
        assert choose_score(direct, aftermath) is direct

    def test_delay_travels_with_closure(self):
        direct = DayScore(closure=30, delay=60)
        aftermath = DayScore(closure=35, delay=5, is_aftermath=True, days_since_event=3)
        chosen = choose_score(direct, aftermath)
        assert (chosen.closure, chosen.delay) == (35, 5)

    def test_nothing_on_either_side(self):
        assert choose_score(NO_SCORE, NO_SCORE) is NO_SCORE
