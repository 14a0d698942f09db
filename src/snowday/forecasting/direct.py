"""Direct-conditions scorer: one day's own snow/ice/temperature/alerts.

Closure is driven by effective snow (ice counts triple since it cannot be
plowed) relative to the regional closure threshold. Delay is derived from the
resulting closure: when closing is likely, delaying is not the decision being
made, and when closing is unlikely a delay is the usual hedge.
"""

from __future__ import annotations

import logging
import re
from datetime import date

from snowday.common.types import ICE_WEIGHT, MAX_PCT, clamp_pct, precip_fraction
from snowday.forecasting.alerts import alert_bonus, has_winter_evidence
from snowday.forecasting.base import DayScore
from snowday.forecasting.geography import GeographyContext
from snowday.weather.models import WeatherAlert

logger = logging.getLogger(__name__)

# Keyword ladder used when no amount is available (closure points before the
# preparedness discount). Checked in order; every rung needs a snow word.
_KEYWORD_LADDER: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"heavy\s+snow|blizzard"), 70),
    (re.compile(r"slight\s+chance"), 5),
    (re.compile(r"chance"), 15),
    (re.compile(r"snow\s+showers|flurries"), 10),
    (re.compile(r"snow"), 25),
]
_SNOW_WORD = re.compile(r"snow|flurr|blizzard")

_KEYWORD_DELAY_RATIO = 2.5
_KEYWORD_DELAY_CAP = 85


def temperature_factor(temp_f: float) -> float:
    """Cold days keep roads worse for longer."""
    if temp_f < 20:
        return 1.3
    if temp_f < 25:
        return 1.15
    return 1.0


def delay_from_closure(closure: float) -> float:
    """Delay chance implied by a closure chance.

    >= 80: closing is the call, delay shrinks toward a 5-20 floor.
    40-80: borderline, delay is a broad 30-50 hedge.
    < 40:  delay grows with closure, capped at 75.
    """
    if closure >= 80:
        return max(5.0, 20.0 - (closure - 80.0))
    if closure >= 40:
        return 50.0 - (closure - 40.0) * 0.5
    return min(75.0, closure * 2.0)


def keyword_rung(text: str) -> int:
    """Closure points for forecast wording alone (0 when nothing matches)."""
    lowered = text.lower()
    if not _SNOW_WORD.search(lowered):
        return 0
    for pattern, points in _KEYWORD_LADDER:
        if pattern.search(lowered):
            return points
    return 0


def score_direct(
    snow_inches: float,
    ice_inches: float,
    temperature: float,
    precip_pct: float | None,
    geography: GeographyContext,
    alerts: list[WeatherAlert],
    day: date,
    keyword_text: str = "",
    ice_weight: float = ICE_WEIGHT,
) -> DayScore:
    """Score closure/delay for a day from its own conditions.

    Args:
        snow_inches: resolved snow for the day (including the night before)
        ice_inches: resolved ice for the day
        temperature: daytime temperature in Fahrenheit
        precip_pct: chance of precipitation in percent (None counts as 0)
        geography: regional preparedness context
        alerts: all known alerts; only those covering *day* count
        day: calendar date being scored
        keyword_text: forecast wording used when no amount is available
        ice_weight: inches of snow one inch of ice counts as

    Returns:
        DayScore with integer closure/delay in [0, 95]
    """
    effective_snow = snow_inches + ice_inches * ice_weight
    confidence = precip_fraction(precip_pct)
    bonus = alert_bonus(alerts, day) if has_winter_evidence(keyword_text, effective_snow) else 0

    if effective_snow > 0:
        raw_ratio = effective_snow * temperature_factor(temperature) / geography.closure_threshold_inches
        base_closure = min(100.0, raw_ratio * 100.0) * confidence
        closure = clamp_pct(min(MAX_PCT, base_closure + bonus))
        delay = clamp_pct(delay_from_closure(closure))
        details = (
            f"effective={effective_snow:.2f}in ratio={raw_ratio:.2f} "
            f"base={base_closure:.0f} alert=+{bonus}"
        )
    else:
        rung = keyword_rung(keyword_text)
        adjusted = rung / (1.0 + geography.preparedness_index * 5.0) * confidence
        closure = clamp_pct(min(MAX_PCT, adjusted + bonus))
        delay = clamp_pct(min(closure * _KEYWORD_DELAY_RATIO, _KEYWORD_DELAY_CAP))
        details = f"keyword={rung} adjusted={adjusted:.1f} alert=+{bonus}"

    logger.debug("Direct %s: closure=%d delay=%d (%s)", day.isoformat(), closure, delay, details)
    return DayScore(closure=closure, delay=delay, details=details)
