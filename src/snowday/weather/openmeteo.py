"""Decoder for Open-Meteo archive (historical daily) responses.

Expects a response requested with ``temperature_unit=fahrenheit`` and
``precipitation_unit=inch``, so snowfall and precipitation are already inches.
"""

from __future__ import annotations

import logging
from datetime import date

import numpy as np

from snowday.common.types import JsonDict
from snowday.weather.models import HistoricalWeatherDay

logger = logging.getLogger(__name__)

DAILY_VARIABLES = "temperature_2m_max,temperature_2m_min,snowfall_sum,precipitation_sum"


def _column(daily: JsonDict, key: str, n: int) -> np.ndarray:
    """Daily column as float array, None → NaN, padded with NaN to length n."""
    values = list(daily.get(key) or [])[:n]
    values += [None] * (n - len(values))
    return np.array([np.nan if v is None else v for v in values], dtype=np.float64)


def parse_archive_history(payload: JsonDict) -> list[HistoricalWeatherDay]:
    """Decode the ``daily`` block into HistoricalWeatherDay records, oldest first.

    Days with no temperature are skipped; missing snowfall or precipitation
    counts as zero.
    """
    daily = payload.get("daily")
    if not daily:
        logger.info("Open-Meteo archive response has no 'daily' block")
        return []

    times = list(daily.get("time") or [])
    n = len(times)
    snowfall = np.nan_to_num(_column(daily, "snowfall_sum", n), nan=0.0)
    precip = np.nan_to_num(_column(daily, "precipitation_sum", n), nan=0.0)
    t_max = _column(daily, "temperature_2m_max", n)
    t_min = _column(daily, "temperature_2m_min", n)

    days: list[HistoricalWeatherDay] = []
    for i, raw_date in enumerate(times):
        try:
            day = date.fromisoformat(str(raw_date))
        except ValueError:
            logger.info("Skipping archive day with bad date %r", raw_date)
            continue
        if np.isnan(t_max[i]):
            logger.info("Skipping archive day %s with no temperature", day)
            continue
        low = t_min[i] if not np.isnan(t_min[i]) else t_max[i]
        days.append(
            HistoricalWeatherDay(
                date=day,
                snowfall_inches=max(0.0, float(snowfall[i])),
                temp_max=float(t_max[i]),
                temp_min=float(low),
                precipitation=max(0.0, float(precip[i])),
            )
        )
        if snowfall[i] > 0:
            logger.debug("History %s: %.1fin snow, %.0f-%.0fF", day, snowfall[i], low, t_max[i])

    days.sort(key=lambda d: d.date)
    return days
