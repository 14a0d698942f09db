"""Top-level orchestrator.

Wires together: day grouping → event ledger → direct score → aftermath score →
max rule. The ledger and temperature map are built over the whole window
before any day is scored, so an event on a weekend or overnight still carries
into the following school day.
"""

from __future__ import annotations

import logging
from datetime import date

from snowday.common.types import ICE_WEIGHT
from snowday.config import Settings, get_settings
from snowday.forecasting.aftermath import score_aftermath
from snowday.forecasting.base import DayScore
from snowday.forecasting.direct import score_direct
from snowday.forecasting.geography import GeographyContext
from snowday.forecasting.ledger import (
    DayUnit,
    Ledger,
    build_ledger,
    daily_temperatures,
    group_day_units,
)
from snowday.forecasting.reducers import choose_score
from snowday.signals.models import SnowDayForecast
from snowday.weather.models import ForecastPeriod, HistoricalWeatherDay, WeatherAlert

logger = logging.getLogger(__name__)


def _check_preconditions(
    periods: list[ForecastPeriod] | None,
    geography: GeographyContext | None,
) -> None:
    if not periods:
        raise ValueError("At least one forecast period is required")
    if geography is None:
        raise ValueError("Geography context is required")
    if not geography.is_populated:
        raise ValueError(
            f"Geography context is incomplete: lat={geography.latitude}, "
            f"lon={geography.longitude}, snowfall={geography.avg_annual_snowfall}"
        )


def _warn_if_unordered(periods: list[ForecastPeriod]) -> None:
    for prev, cur in zip(periods, periods[1:]):
        if cur.start_time < prev.start_time:
            logger.warning(
                "Forecast periods out of order: %r (%s) follows %r (%s)",
                cur.name, cur.start_time.isoformat(), prev.name, prev.start_time.isoformat(),
            )
            return


def score_unit(
    unit: DayUnit,
    ledger: Ledger,
    temps: dict[date, float],
    geography: GeographyContext,
    alerts: list[WeatherAlert],
    ice_weight: float = ICE_WEIGHT,
) -> tuple[DayScore, str | None]:
    """Final score for one day unit plus its snowfall display string."""
    assert unit.day is not None
    amounts = unit.amounts()

    direct = score_direct(
        snow_inches=amounts.snow_inches,
        ice_inches=amounts.ice_inches,
        temperature=unit.day.temperature,
        precip_pct=unit.day.precipitation_probability,
        geography=geography,
        alerts=alerts,
        day=unit.date,
        keyword_text=unit.text,
        ice_weight=ice_weight,
    )
    aftermath = score_aftermath(
        target=unit.date,
        target_temp=unit.day.temperature,
        ledger=ledger,
        temps=temps,
        geography=geography,
        alerts=alerts,
    )
    chosen = choose_score(direct, aftermath)
    logger.debug(
        "%s: direct=%d/%d aftermath=%d/%d -> %s",
        unit.date.isoformat(), direct.closure, direct.delay,
        aftermath.closure, aftermath.delay,
        "aftermath" if chosen is aftermath else "direct",
    )
    return chosen, amounts.display


def calculate_snow_day_chances(
    periods: list[ForecastPeriod],
    geography: GeographyContext,
    history: list[HistoricalWeatherDay] | None = None,
    alerts: list[WeatherAlert] | None = None,
    settings: Settings | None = None,
) -> list[SnowDayForecast]:
    """Closure and delay chances for each daytime period in the window.

    Args:
        periods: chronologically ordered forecast periods (day/night halves)
        geography: location and climate context for the request
        history: recent observed days, oldest first (optional)
        alerts: active alerts with classified severity (optional)
        settings: overrides for ``get_settings()``

    Returns:
        One SnowDayForecast per daytime period, at most ``max_output_days``.

    Raises:
        ValueError: when there are no periods or the geography is incomplete.
    """
    _check_preconditions(periods, geography)
    if settings is None:
        settings = get_settings()
    history = list(history or [])
    alerts = list(alerts or [])

    _warn_if_unordered(periods)

    units = group_day_units(periods)
    ledger = build_ledger(units, history)
    temps = daily_temperatures(units, history)
    logger.debug(
        "Window: %d periods, %d units, %d history days, %d ledger events, %d alerts",
        len(periods), len(units), len(history), len(ledger), len(alerts),
    )

    results: list[SnowDayForecast] = []
    for unit in units:
        if unit.day is None:
            continue
        if len(results) >= settings.max_output_days:
            break

        score, display = score_unit(unit, ledger, temps, geography, alerts)
        precip = unit.day.precipitation_probability
        results.append(
            SnowDayForecast(
                day_name=unit.day.name,
                date=unit.day.start_time,
                closure_pct=score.closure,
                delay_pct=score.delay,
                temperature=unit.day.temperature,
                forecast_text=unit.day.detailed_forecast,
                precip_pct=int(round(precip)) if precip is not None else 0,
                snowfall_display=display,
                is_aftermath_day=score.is_aftermath,
                days_since_event=score.days_since_event,
            )
        )

    return results


def winter_ledger(
    periods: list[ForecastPeriod],
    history: list[HistoricalWeatherDay] | None = None,
) -> Ledger:
    """The winter-event ledger the engine would build for this window."""
    if not periods and not history:
        raise ValueError("Forecast periods or history days are required")
    units = group_day_units(list(periods or []))
    return build_ledger(units, list(history or []))
