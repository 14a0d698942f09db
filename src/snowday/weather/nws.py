"""Decoders for NWS/weather.gov JSON payloads (forecast periods and alerts).

The payloads are downloaded elsewhere; these functions only turn the parsed
JSON into engine inputs. A malformed period or alert is skipped and logged,
never raised.
"""

from __future__ import annotations

import logging
from datetime import datetime

from snowday.common.types import JsonDict, celsius_to_fahrenheit, cm_to_inches, m_to_inches, mm_to_inches
from snowday.weather.models import AlertSeverity, ForecastPeriod, WeatherAlert

logger = logging.getLogger(__name__)

# Substring lists checked in order, strongest severity first
_SEVERITY_RULES: list[tuple[AlertSeverity, tuple[str, ...]]] = [
    (AlertSeverity.EXTREME, ("blizzard warning", "ice storm warning")),
    (AlertSeverity.WARNING, ("winter storm warning", "snow squall warning", "extreme cold warning")),
    (AlertSeverity.WATCH, (
        "winter storm watch", "blizzard watch", "extreme cold watch",
        "wind chill watch", "freeze watch",
    )),
    (AlertSeverity.ADVISORY, (
        "winter weather advisory", "wind chill advisory", "freezing rain advisory",
        "snow advisory", "cold weather advisory",
    )),
]

_WINTER_ALERT_WORDS = ("winter", "snow", "ice", "blizzard", "freeze", "cold")

# wmoUnit codes seen on snowfallAmount / iceAccumulation
_TO_INCHES = {
    "wmoUnit:mm": mm_to_inches,
    "wmoUnit:cm": cm_to_inches,
    "wmoUnit:m": m_to_inches,
    "wmoUnit:in": float,
}


def _parse_iso(s: str | None) -> datetime | None:
    if not s:
        return None
    return datetime.fromisoformat(s)


def classify_alert_severity(event: str) -> AlertSeverity:
    """Severity for an NWS event name such as "Winter Storm Warning"."""
    lowered = event.lower()
    for severity, names in _SEVERITY_RULES:
        if any(name in lowered for name in names):
            return severity
    return AlertSeverity.NONE


def is_winter_alert(event: str) -> bool:
    lowered = event.lower()
    return any(word in lowered for word in _WINTER_ALERT_WORDS)


def quantity_to_inches(quantity: JsonDict | None) -> float | None:
    """Convert an NWS QuantitativeValue to inches.

    A value without a unit code is taken to be meters.
    """
    if not quantity:
        return None
    value = quantity.get("value")
    if value is None:
        return None
    unit = quantity.get("unitCode") or "wmoUnit:m"
    convert = _TO_INCHES.get(str(unit))
    if convert is None:
        logger.info("Unknown unit code %r on quantitative value, ignoring", unit)
        return None
    return max(0.0, convert(float(value)))


def _temperature_f(period: JsonDict) -> float:
    temp = float(period["temperature"])
    if str(period.get("temperatureUnit", "F")).upper() == "C":
        return celsius_to_fahrenheit(temp)
    return temp


def parse_forecast_period(period: JsonDict) -> ForecastPeriod:
    """One entry of ``properties.periods``; raises on missing required keys."""
    pop = period.get("probabilityOfPrecipitation") or {}
    pop_value = pop.get("value")
    start = _parse_iso(period["startTime"])
    end = _parse_iso(period["endTime"])
    if start is None or end is None:
        raise ValueError(f"period {period.get('name')!r} has no start/end time")

    return ForecastPeriod(
        name=str(period.get("name", "")),
        start_time=start,
        end_time=end,
        is_daytime=bool(period["isDaytime"]),
        temperature=_temperature_f(period),
        precipitation_probability=float(pop_value) if pop_value is not None else None,
        short_forecast=period.get("shortForecast") or "",
        detailed_forecast=period.get("detailedForecast") or "",
        snowfall_inches=quantity_to_inches(period.get("snowfallAmount")),
        ice_inches=quantity_to_inches(period.get("iceAccumulation")),
    )


def parse_forecast_periods(payload: JsonDict) -> list[ForecastPeriod]:
    """Decode a /gridpoints/{office}/{x},{y}/forecast response."""
    raw_periods = (payload.get("properties") or {}).get("periods") or []
    periods: list[ForecastPeriod] = []
    for raw in raw_periods:
        try:
            periods.append(parse_forecast_period(raw))
        except (AttributeError, KeyError, ValueError, TypeError) as exc:
            logger.info("Skipping forecast period %r: %s", raw.get("name") if isinstance(raw, dict) else raw, exc)
    logger.debug("Decoded %d of %d forecast periods", len(periods), len(raw_periods))
    return periods


def parse_alerts(payload: JsonDict, winter_only: bool = True) -> list[WeatherAlert]:
    """Decode an /alerts/active response into classified alerts.

    Non-winter alerts (heat, flood, ...) are dropped unless *winter_only* is False.
    """
    alerts: list[WeatherAlert] = []
    for feature in payload.get("features") or []:
        try:
            props = feature.get("properties") or {}
            event = props.get("event") or ""
            if winter_only and not is_winter_alert(event):
                logger.debug("Ignoring non-winter alert %r", event)
                continue
            alert = WeatherAlert(
                event=event,
                severity=classify_alert_severity(event),
                onset=_parse_iso(props.get("onset")),
                expires=_parse_iso(props.get("expires")),
                ends=_parse_iso(props.get("ends")),
                headline=props.get("headline") or "",
                description=props.get("description") or "",
            )
        except (AttributeError, ValueError, TypeError) as exc:
            logger.info("Skipping alert: %s", exc)
            continue
        logger.debug("Alert %r -> %s", alert.event, alert.severity.name)
        alerts.append(alert)
    return alerts
