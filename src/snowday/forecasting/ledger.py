"""Winter-event ledger.

The ledger is a plain ``dict[date, WinterEvent]`` built once per request from
the whole window (recent history plus every forecast period, nights and
weekends included) before any aftermath lookup runs.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date

from snowday.common.types import ICE_WEIGHT
from snowday.forecasting.amounts import SnowIceAmounts, estimate_keyword_only, extract_amounts
from snowday.weather.models import ForecastPeriod, HistoricalWeatherDay

logger = logging.getLogger(__name__)

# Thresholds for a day to count as a winter event
SNOW_EVENT_INCHES = 1.0
ICE_EVENT_INCHES = 0.05
KEYWORD_EVENT_EFFECTIVE_INCHES = 0.5

_STICKY_PATTERN = re.compile(r"freezing\s+rain|sleet|\bice\b|wintry\s+mix|refreez")


@dataclass(frozen=True)
class DayUnit:
    """A daytime period and the night that precedes it.

    ``day`` is None for a trailing night with no following day in the
    window; such a unit is dated by the morning the night ends on.
    """

    date: date
    day: ForecastPeriod | None
    night: ForecastPeriod | None = None

    @property
    def anchor(self) -> ForecastPeriod:
        if self.day is not None:
            return self.day
        assert self.night is not None
        return self.night

    @property
    def temperature(self) -> float:
        return self.anchor.temperature

    @property
    def text(self) -> str:
        return " ".join(p.text for p in (self.night, self.day) if p is not None)

    def amounts(self) -> SnowIceAmounts:
        if self.day is None:
            return extract_amounts(self.anchor)
        return extract_amounts(self.day, self.night)


@dataclass(frozen=True)
class WinterEvent:
    """A day with materially significant snow and/or ice.

    Attributes:
        date: calendar date of the event
        effective_amount: snow + ice × ice_weight, in inches
        is_ice_event: ice accumulation reached the ice threshold
        snow_inches: snow component
        ice_inches: ice component
        sticky: wording suggests ice/refreeze that lingers on roads
        keyword_only: seeded from wording alone (no numeric amount)
    """

    date: date
    effective_amount: float
    is_ice_event: bool
    snow_inches: float = 0.0
    ice_inches: float = 0.0
    sticky: bool = False
    keyword_only: bool = False


Ledger = dict[date, WinterEvent]


def group_day_units(periods: list[ForecastPeriod]) -> list[DayUnit]:
    """Pair each daytime period with the night immediately before it."""
    units: list[DayUnit] = []
    pending_night: ForecastPeriod | None = None

    for period in periods:
        if period.is_daytime:
            units.append(DayUnit(date=period.start_time.date(), day=period, night=pending_night))
            pending_night = None
            continue
        if pending_night is not None:
            units.append(DayUnit(date=pending_night.end_time.date(), day=None, night=pending_night))
        pending_night = period

    if pending_night is not None:
        units.append(DayUnit(date=pending_night.end_time.date(), day=None, night=pending_night))

    return units


def is_sticky(text: str) -> bool:
    """Freezing rain, sleet, ice or refreeze wording."""
    return bool(_STICKY_PATTERN.search(text.lower()))


def event_from_amounts(
    day: date,
    amounts: SnowIceAmounts,
    text: str,
    ice_weight: float = ICE_WEIGHT,
) -> WinterEvent | None:
    """A WinterEvent if the resolved amounts cross the event thresholds."""
    if amounts.snow_inches < SNOW_EVENT_INCHES and amounts.ice_inches < ICE_EVENT_INCHES:
        return None
    return WinterEvent(
        date=day,
        effective_amount=max(0.0, amounts.effective(ice_weight)),
        is_ice_event=amounts.ice_inches >= ICE_EVENT_INCHES,
        snow_inches=amounts.snow_inches,
        ice_inches=amounts.ice_inches,
        sticky=is_sticky(text),
    )


def event_from_keywords(unit: DayUnit, ice_weight: float = ICE_WEIGHT) -> WinterEvent | None:
    """Low-confidence event from wording alone, when it is strong enough."""
    snow, ice = estimate_keyword_only(unit.day, unit.night)
    effective = snow + ice * ice_weight
    if effective < KEYWORD_EVENT_EFFECTIVE_INCHES:
        return None
    return WinterEvent(
        date=unit.date,
        effective_amount=effective,
        is_ice_event=ice >= ICE_EVENT_INCHES,
        snow_inches=snow,
        ice_inches=ice,
        sticky=is_sticky(unit.text),
        keyword_only=True,
    )


def event_from_unit(unit: DayUnit, ice_weight: float = ICE_WEIGHT) -> WinterEvent | None:
    amounts = unit.amounts()
    event = event_from_amounts(unit.date, amounts, unit.text, ice_weight)
    if event is None and not amounts.has_numeric_amount:
        event = event_from_keywords(unit, ice_weight)
    return event


def event_from_history(day: HistoricalWeatherDay) -> WinterEvent | None:
    """Observed snowfall is structured and authoritative; history carries no ice."""
    snow = max(0.0, day.snowfall_inches)
    if snow < SNOW_EVENT_INCHES:
        return None
    return WinterEvent(
        date=day.date,
        effective_amount=snow,
        is_ice_event=False,
        snow_inches=snow,
    )


def build_ledger(
    units: list[DayUnit],
    history: list[HistoricalWeatherDay],
    ice_weight: float = ICE_WEIGHT,
) -> Ledger:
    """Record every winter event in history and the forecast window.

    History is written first so a forecast day for the same date wins.
    """
    ledger: Ledger = {}

    for past in history:
        event = event_from_history(past)
        if event is not None:
            ledger[event.date] = event

    for unit in units:
        event = event_from_unit(unit, ice_weight)
        if event is None:
            continue
        ledger[event.date] = event
        logger.debug(
            "Ledger %s: %.2fin effective (ice=%s, sticky=%s, keyword_only=%s)",
            event.date.isoformat(), event.effective_amount,
            event.is_ice_event, event.sticky, event.keyword_only,
        )

    return ledger


def daily_temperatures(
    units: list[DayUnit],
    history: list[HistoricalWeatherDay],
) -> dict[date, float]:
    """Representative temperature per date: daytime high, or observed max."""
    temps: dict[date, float] = {past.date: past.temp_max for past in history}
    for unit in units:
        if unit.day is None and unit.date in temps:
            continue
        temps[unit.date] = unit.temperature
    return temps
