"""Output data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# (minimum percent, label), strongest first
_CHANCE_LEVELS: list[tuple[int, str]] = [(70, "High"), (40, "Moderate"), (15, "Low")]
_DELAY_LEVELS: list[tuple[int, str]] = [(60, "High"), (35, "Moderate"), (15, "Low")]


def _level(pct: int, levels: list[tuple[int, str]]) -> str:
    for minimum, label in levels:
        if pct >= minimum:
            return label
    return "Very Low"


@dataclass
class SnowDayForecast:
    """Closure/delay outlook for one forecast day.

    Attributes:
        day_name: forecast period name, e.g. "Tuesday"
        date: start of the daytime period
        closure_pct: chance of a closure (0-95)
        delay_pct: chance of a delayed opening (0-95)
        temperature: daytime temperature in Fahrenheit
        forecast_text: detailed forecast prose
        precip_pct: chance of precipitation in percent (0 when unknown)
        snowfall_display: human-readable snowfall, e.g. '4-8"' or 'Heavy'
        is_aftermath_day: the closure comes from a prior event, not today's weather
        days_since_event: days since that prior event
    """

    day_name: str
    date: datetime
    closure_pct: int
    delay_pct: int
    temperature: float
    forecast_text: str
    precip_pct: int
    snowfall_display: str | None = None
    is_aftermath_day: bool = False
    days_since_event: int | None = None

    @property
    def chance_level(self) -> str:
        return _level(self.closure_pct, _CHANCE_LEVELS)

    @property
    def delay_level(self) -> str:
        return _level(self.delay_pct, _DELAY_LEVELS)
