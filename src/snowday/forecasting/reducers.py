"""The two "take the max" rules of the engine.

Kept separate from the scoring code so each can be tested on its own.
"""

from __future__ import annotations

from snowday.forecasting.base import AftermathCandidate, DayScore


def strongest_event(candidates: list[AftermathCandidate]) -> AftermathCandidate | None:
    """Pick the single highest-closure event for a day.

    Events never stack: overlapping storms and advisories would otherwise
    compound into near-certain closures. Ties go to the most recent event.
    """
    best: AftermathCandidate | None = None
    for candidate in candidates:
        if best is None:
            best = candidate
            continue
        if candidate.closure > best.closure:
            best = candidate
        elif candidate.closure == best.closure and candidate.days_since < best.days_since:
            best = candidate
    return best


def choose_score(direct: DayScore, aftermath: DayScore) -> DayScore:
    """Keep whichever side has the higher closure, with that side's delay.

    Ties favour the direct score.
    """
    if aftermath.closure > direct.closure:
        return aftermath
    return direct
