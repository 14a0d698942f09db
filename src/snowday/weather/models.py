"""Weather input data models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum

from snowday.common.types import precip_fraction


@dataclass(frozen=True)
class ForecastPeriod:
    """A single NWS-style forecast period (day or night half).

    Attributes:
        name: period label, e.g. "Monday" or "Monday Night"
        start_time: period start
        end_time: period end
        is_daytime: True for the daytime half
        temperature: forecast temperature in Fahrenheit
        precipitation_probability: chance of precipitation in percent (may be None)
        short_forecast: short forecast text, e.g. "Snow Likely"
        detailed_forecast: full forecast prose
        snowfall_inches: structured snowfall amount, when the source provides one
        ice_inches: structured ice accumulation, when the source provides one
    """

    name: str
    start_time: datetime
    end_time: datetime
    is_daytime: bool
    temperature: float
    precipitation_probability: float | None = None
    short_forecast: str = ""
    detailed_forecast: str = ""
    snowfall_inches: float | None = None
    ice_inches: float | None = None

    @property
    def text(self) -> str:
        """Lower-cased detailed + short forecast text."""
        return f"{self.detailed_forecast} {self.short_forecast}".lower()

    @property
    def precip_fraction(self) -> float:
        """Precipitation probability as a fraction; 0.0 when unknown."""
        return precip_fraction(self.precipitation_probability)


class AlertSeverity(IntEnum):
    """Winter alert severity, ordered from weakest to strongest."""

    NONE = 0
    ADVISORY = 1  # e.g. Winter Weather Advisory
    WATCH = 2  # e.g. Winter Storm Watch
    WARNING = 3  # e.g. Winter Storm Warning
    EXTREME = 4  # Blizzard / Ice Storm Warning


@dataclass(frozen=True)
class WeatherAlert:
    """An NWS alert with its severity already classified."""

    event: str
    severity: AlertSeverity
    onset: datetime | None = None
    expires: datetime | None = None
    ends: datetime | None = None
    headline: str = ""
    description: str = ""

    @property
    def effective_end(self) -> datetime | None:
        """``ends`` if present, else ``expires``; None means open-ended."""
        if self.ends is not None:
            return self.ends
        return self.expires

    def covers(self, day: date) -> bool:
        """Whether the alert window (by calendar date) includes *day*.

        An alert without an onset covers nothing.
        """
        if self.onset is None:
            return False
        if day < self.onset.date():
            return False
        end = self.effective_end
        return end is None or day <= end.date()


@dataclass(frozen=True)
class HistoricalWeatherDay:
    """Observed daily weather for a recent day (Open-Meteo archive)."""

    date: date
    snowfall_inches: float
    temp_max: float
    temp_min: float
    precipitation: float = 0.0
