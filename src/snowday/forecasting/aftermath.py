"""Aftermath model: carry-over closure/delay from prior winter events.

Snow is plowed and fades on a fixed schedule followed by an exponential tail.
Ice stays as long as it stays frozen and disappears quickly after a thaw, so its
decay depends on each day's temperature. Only the strongest prior event counts
for a given day.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

import numpy as np

from snowday.common.types import MAX_PCT, clamp_pct
from snowday.forecasting.alerts import alert_bonus
from snowday.forecasting.base import NO_SCORE, AftermathCandidate, DayScore
from snowday.forecasting.direct import delay_from_closure
from snowday.forecasting.geography import GeographyContext
from snowday.forecasting.ledger import Ledger, WinterEvent
from snowday.forecasting.reducers import strongest_event
from snowday.weather.models import WeatherAlert

logger = logging.getLogger(__name__)

FREEZING_F = 32.0

# (minimum effective/threshold ratio, base closure probability)
_RATIO_STEPS: list[tuple[float, float]] = [
    (2.5, 98.0),
    (2.0, 95.0),
    (1.5, 85.0),
    (1.0, 70.0),
    (0.75, 50.0),
]
_RATIO_FLOOR_PROB = 30.0

# Share of window days at or below freezing for cold to "persist"
_COLD_PERSISTENCE_SHARE = 0.7

_MIN_HORIZON_DAYS = 2
_MAX_HORIZON_DAYS = 5

_ICE_SLOW_DECAY = 0.85  # still frozen
_ICE_FAST_DECAY = 0.50  # thawing
_ICE_MELT_COEF = 0.7

_SNOW_DAY_MULTIPLIERS = {1: 0.95, 2: 0.90, 3: 0.70}
_SNOW_MELT_COEF = 0.5

# Events below this effective depth are most likely keyword guesses
_SMALL_EVENT_INCHES = 1.0
_SMALL_EVENT_DAY1 = 0.80
_SMALL_EVENT_LATER = 0.10

_MAJOR_EVENT_INCHES = 6.0
_MAJOR_EVENT_DELAY_BOOST = 1.2
_LATE_DELAY_RATIO = 3.0
_LATE_DELAY_CAP = 50.0


def ratio_probability(ratio: float) -> float:
    """Base closure probability for an event of *ratio* × the closure threshold."""
    for minimum, probability in _RATIO_STEPS:
        if ratio >= minimum:
            return probability
    return _RATIO_FLOOR_PROB


def cold_persists(temps: dict[date, float], start: date, end: date) -> bool:
    """True when >= 70% of the known daily temperatures in [start, end] are freezing."""
    window = [
        temps[start + timedelta(days=i)]
        for i in range((end - start).days + 1)
        if start + timedelta(days=i) in temps
    ]
    if not window:
        return False
    cold_days = sum(1 for t in window if t <= FREEZING_F)
    persists = cold_days / len(window) >= _COLD_PERSISTENCE_SHARE
    if persists:
        logger.debug("Cold persistence %s..%s: %d/%d days freezing", start, end, cold_days, len(window))
    return persists


def event_severity(event: WinterEvent, geography: GeographyContext) -> float:
    """Event size relative to the regional threshold, normalised to [0, 1]."""
    ratio = event.effective_amount / geography.closure_threshold_inches
    return float(np.clip(ratio / 2.5, 0.0, 1.0))


def aftermath_horizon(event: WinterEvent, geography: GeographyContext, cold: bool) -> int:
    """How many days after *event* it can still affect schools.

    Normally the region's typical closure days; lingering cold or sticky ice
    stretches it to a severity-adjusted 2-5 days.
    """
    typical = geography.typical_closure_days
    if not (cold or event.sticky):
        return typical

    unpreparedness = 1.0 - geography.preparedness_index
    horizon = 2.0 + 2.2 * unpreparedness + 1.8 * event_severity(event, geography)
    if cold:
        horizon += 0.8
    if event.sticky:
        horizon += 0.9
    adjusted = int(np.clip(round(horizon), _MIN_HORIZON_DAYS, _MAX_HORIZON_DAYS))
    return max(typical, adjusted)


def _ice_closure(
    base: float,
    event: WinterEvent,
    days_since: int,
    target_temp: float,
    temps: dict[date, float],
    geography: GeographyContext,
) -> float:
    unpreparedness = 1.0 - geography.preparedness_index
    value = min(100.0, base * (1.5 + unpreparedness))
    for k in range(1, days_since + 1):
        temp = temps.get(event.date + timedelta(days=k), target_temp)
        value *= _ICE_SLOW_DECAY if temp <= FREEZING_F else _ICE_FAST_DECAY
    return value * (1.0 - _ICE_MELT_COEF * geography.melt_factor(target_temp))


def _snow_closure(
    base: float,
    event: WinterEvent,
    days_since: int,
    target_temp: float,
    geography: GeographyContext,
) -> float:
    if event.effective_amount < _SMALL_EVENT_INCHES:
        multiplier = _SMALL_EVENT_DAY1 if days_since == 1 else _SMALL_EVENT_LATER
    elif days_since in _SNOW_DAY_MULTIPLIERS:
        multiplier = _SNOW_DAY_MULTIPLIERS[days_since]
    else:
        tail = (1.0 - geography.aftermath_decay_rate) ** (days_since - 3)
        multiplier = _SNOW_DAY_MULTIPLIERS[3] * tail
    return base * multiplier * (1.0 - _SNOW_MELT_COEF * geography.melt_factor(target_temp))


def snow_delay(closure: float, days_since: int, effective_amount: float) -> float:
    """Delay chance after a snow event; late days are delay-dominant."""
    if days_since == 1:
        delay = closure * 0.90
    elif days_since <= 3:
        delay = closure * 0.85
    else:
        delay = closure * _LATE_DELAY_RATIO
    if effective_amount > _MAJOR_EVENT_INCHES:
        delay *= _MAJOR_EVENT_DELAY_BOOST
    if days_since >= 4:
        delay = min(_LATE_DELAY_CAP, delay)
    return delay


def evaluate_event(
    event: WinterEvent,
    target: date,
    target_temp: float,
    temps: dict[date, float],
    geography: GeographyContext,
) -> AftermathCandidate | None:
    """Decayed closure probability that *event* carries onto *target*."""
    days_since = (target - event.date).days
    if days_since <= 0:
        return None

    cold = cold_persists(temps, event.date, target)
    horizon = aftermath_horizon(event, geography, cold)
    if days_since > horizon:
        return None

    ratio = event.effective_amount / geography.closure_threshold_inches
    prep_factor = 1.5 - geography.preparedness_index
    base = min(100.0, ratio_probability(ratio) * prep_factor)

    if event.is_ice_event:
        closure = _ice_closure(base, event, days_since, target_temp, temps, geography)
    else:
        closure = _snow_closure(base, event, days_since, target_temp, geography)

    logger.debug(
        "Aftermath %s from %s (%dd, horizon=%d, ice=%s): ratio=%.2f base=%.0f -> %.1f",
        target, event.date, days_since, horizon, event.is_ice_event, ratio, base, closure,
    )
    return AftermathCandidate(
        event_date=event.date,
        days_since=days_since,
        closure=max(0.0, closure),
        is_ice_event=event.is_ice_event,
        effective_amount=event.effective_amount,
    )


def score_aftermath(
    target: date,
    target_temp: float,
    ledger: Ledger,
    temps: dict[date, float],
    geography: GeographyContext,
    alerts: list[WeatherAlert],
) -> DayScore:
    """Aftermath closure/delay for *target* from the strongest prior event.

    An alert bonus is added only when an alert is in effect on *target*
    itself; an alert that has already ended does not inflate later days.
    """
    candidates: list[AftermathCandidate] = []
    for event in ledger.values():
        candidate = evaluate_event(event, target, target_temp, temps, geography)
        if candidate is not None:
            candidates.append(candidate)

    best = strongest_event(candidates)
    if best is None or best.closure <= 0:
        return NO_SCORE

    bonus = alert_bonus(alerts, target)
    closure = clamp_pct(min(MAX_PCT, best.closure + bonus))
    if best.is_ice_event:
        delay = clamp_pct(delay_from_closure(closure))
    else:
        delay = clamp_pct(snow_delay(closure, best.days_since, best.effective_amount))

    return DayScore(
        closure=closure,
        delay=delay,
        is_aftermath=True,
        days_since_event=best.days_since,
        details=(
            f"{'ice' if best.is_ice_event else 'snow'} event {best.event_date.isoformat()} "
            f"({best.days_since}d ago, {best.effective_amount:.1f}in) alert=+{bonus}"
        ),
    )
