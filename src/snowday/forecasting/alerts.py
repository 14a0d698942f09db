"""Alert window checks and closure bonuses."""

from __future__ import annotations

import re
from datetime import date

from snowday.weather.models import AlertSeverity, WeatherAlert

# Closure bonus (percentage points) by the strongest covering alert
_ALERT_BONUS: dict[AlertSeverity, int] = {
    AlertSeverity.EXTREME: 60,
    AlertSeverity.WARNING: 40,
    AlertSeverity.WATCH: 25,
    AlertSeverity.ADVISORY: 15,
    AlertSeverity.NONE: 0,
}

_WINTER_WORDS = re.compile(
    r"snow|flurr|blizzard|sleet|freezing\s+(?:rain|drizzle)|\bice\b|wintry|glaze"
)


def alerts_covering(alerts: list[WeatherAlert], day: date) -> list[WeatherAlert]:
    """Alerts whose onset..(ends ?? expires) window includes *day*."""
    return [a for a in alerts if a.covers(day)]


def max_severity(alerts: list[WeatherAlert]) -> AlertSeverity:
    return max((a.severity for a in alerts), default=AlertSeverity.NONE)


def severity_bonus(severity: AlertSeverity) -> int:
    return _ALERT_BONUS[severity]


def alert_bonus(alerts: list[WeatherAlert], day: date) -> int:
    """Closure bonus from the strongest alert in effect on *day*.

    Alerts do not stack: only the maximum severity counts.
    """
    return severity_bonus(max_severity(alerts_covering(alerts, day)))


def has_winter_evidence(text: str, effective_snow: float = 0.0) -> bool:
    """Whether a day shows any winter signal worth an alert bonus."""
    return effective_snow > 0 or bool(_WINTER_WORDS.search(text.lower()))
