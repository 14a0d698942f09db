"""Shared test fixtures."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from snowday.config import Settings
from snowday.forecasting.geography import GeographyContext
from snowday.weather.models import ForecastPeriod

# Monday
MONDAY = date(2025, 1, 6)


def _make_period(
    day: date,
    is_daytime: bool = True,
    detailed: str = "",
    temperature: float = 30.0,
    precip: float | None = 100.0,
    snow: float | None = None,
    ice: float | None = None,
    short: str = "",
) -> ForecastPeriod:
    """A 6am-6pm day period, or the 6pm-6am night starting on *day*."""
    if is_daytime:
        start = datetime.combine(day, time(6))
        name = day.strftime("%A")
    else:
        start = datetime.combine(day, time(18))
        name = day.strftime("%A") + " Night"
    return ForecastPeriod(
        name=name,
        start_time=start,
        end_time=start + timedelta(hours=12),
        is_daytime=is_daytime,
        temperature=temperature,
        precipitation_probability=precip,
        short_forecast=short,
        detailed_forecast=detailed,
        snowfall_inches=snow,
        ice_inches=ice,
    )


def _make_window(
    start: date,
    days: int,
    overrides: dict[int, dict] | None = None,
    temperature: float = 30.0,
) -> list[ForecastPeriod]:
    """Alternating day/night periods; *overrides* maps a day offset to day-period kwargs."""
    overrides = overrides or {}
    periods: list[ForecastPeriod] = []
    for i in range(days):
        day = start + timedelta(days=i)
        kwargs = {"temperature": temperature, "detailed": "Mostly cloudy."}
        kwargs.update(overrides.get(i, {}))
        periods.append(_make_period(day, True, **kwargs))
        periods.append(_make_period(day, False, detailed="Partly cloudy.", temperature=temperature - 8))
    return periods


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def make_period():
    return _make_period


@pytest.fixture
def make_window():
    return _make_window


@pytest.fixture
def southern_geo():
    """Low-snow region: 7.5 in/yr → 2 in closure threshold."""
    return GeographyContext(state="GA", latitude=33.75, longitude=-84.39, avg_annual_snowfall=7.5)


@pytest.fixture
def midatlantic_geo():
    """15 in/yr → 3 in closure threshold, 4 typical closure days."""
    return GeographyContext(state="VA", latitude=38.03, longitude=-78.48, avg_annual_snowfall=15.0)


@pytest.fixture
def midwest_geo():
    """30 in/yr → preparedness 0.5, 5 in closure threshold."""
    return GeographyContext(state="IL", latitude=41.88, longitude=-87.63, avg_annual_snowfall=30.0)


@pytest.fixture
def settings():
    return Settings(max_output_days=7, log_level="WARNING")


@pytest.fixture
def nws_forecast_payload():
    """Trimmed /gridpoints/.../forecast response with one malformed period."""
    return {
        "properties": {
            "periods": [
                {
                    "number": 1,
                    "name": "Tonight",
                    "startTime": "2025-01-05T18:00:00-05:00",
                    "endTime": "2025-01-06T06:00:00-05:00",
                    "isDaytime": False,
                    "temperature": 24,
                    "temperatureUnit": "F",
                    "probabilityOfPrecipitation": {"unitCode": "wmoUnit:percent", "value": 90},
                    "shortForecast": "Snow",
                    "detailedForecast": "Snow. Low around 24. New snow accumulation of 3 to 5 inches possible.",
                },
                {
                    "number": 2,
                    "name": "Monday",
                    "startTime": "2025-01-06T06:00:00-05:00",
                    "endTime": "2025-01-06T18:00:00-05:00",
                    "isDaytime": True,
                    "temperature": 28,
                    "temperatureUnit": "F",
                    "probabilityOfPrecipitation": {"unitCode": "wmoUnit:percent", "value": 80},
                    "shortForecast": "Snow Likely",
                    "detailedForecast": "Snow likely before noon. High near 28.",
                    "snowfallAmount": {"unitCode": "wmoUnit:cm", "value": 10},
                },
                {
                    "number": 3,
                    "name": "Monday Night",
                    "startTime": "2025-01-06T18:00:00-05:00",
                    "endTime": "2025-01-07T06:00:00-05:00",
                    "isDaytime": False,
                    "temperatureUnit": "F",
                    "shortForecast": "Mostly Cloudy",
                    "detailedForecast": "Mostly cloudy.",
                },
                {
                    "number": 4,
                    "name": "Tuesday",
                    "startTime": "2025-01-07T06:00:00-05:00",
                    "endTime": "2025-01-07T18:00:00-05:00",
                    "isDaytime": True,
                    "temperature": -2,
                    "temperatureUnit": "C",
                    "probabilityOfPrecipitation": {"unitCode": "wmoUnit:percent", "value": None},
                    "shortForecast": "Sunny",
                    "detailedForecast": "Sunny and cold, with a high near 28.",
                },
            ]
        }
    }


@pytest.fixture
def nws_alerts_payload():
    """Trimmed /alerts/active response: one winter alert, one heat alert, one broken."""
    return {
        "features": [
            {
                "properties": {
                    "event": "Winter Storm Warning",
                    "headline": "Winter Storm Warning issued January 5",
                    "description": "Heavy snow expected.",
                    "onset": "2025-01-05T19:00:00-05:00",
                    "expires": "2025-01-06T10:00:00-05:00",
                    "ends": "2025-01-06T19:00:00-05:00",
                }
            },
            {
                "properties": {
                    "event": "Heat Advisory",
                    "onset": "2025-01-06T10:00:00-05:00",
                    "ends": "2025-01-06T19:00:00-05:00",
                }
            },
            {
                "properties": {
                    "event": "Winter Weather Advisory",
                    "onset": "not a timestamp",
                }
            },
        ]
    }


@pytest.fixture
def openmeteo_archive_payload():
    """Trimmed Open-Meteo archive response (fahrenheit / inch units)."""
    return {
        "latitude": 38.03,
        "longitude": -78.48,
        "daily": {
            "time": ["2025-01-02", "2025-01-03", "2025-01-04", "2025-01-05"],
            "temperature_2m_max": [35.1, 29.8, None, 27.0],
            "temperature_2m_min": [22.4, 18.0, 15.0, None],
            "snowfall_sum": [0.0, 3.2, 1.0, None],
            "precipitation_sum": [0.0, 0.31, 0.1, 0.0],
        },
    }
