"""Shared scoring types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DayScore:
    """Closure/delay percentages for one day from one side of the model.

    Attributes:
        closure: chance of a closure, integer percent in [0, 95]
        delay: chance of a delayed opening, integer percent in [0, 95]
        is_aftermath: True when the score comes from a prior winter event
        days_since_event: days between that event and the scored day
        details: human-readable explanation of the score
    """

    closure: int
    delay: int
    is_aftermath: bool = False
    days_since_event: int | None = None
    details: str = ""


NO_SCORE = DayScore(closure=0, delay=0)


@dataclass(frozen=True)
class AftermathCandidate:
    """Carry-over closure from one ledger event onto a target day.

    ``closure`` is the decayed probability before any alert bonus and
    before rounding.
    """

    event_date: date
    days_since: int
    closure: float
    is_ice_event: bool
    effective_amount: float
