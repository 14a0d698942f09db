"""Forecast output formatters: Rich table, JSON, CSV."""

from __future__ import annotations

import csv
import io
import json

from rich.console import Console
from rich.table import Table

from snowday.signals.models import SnowDayForecast

_LEVEL_COLORS = {
    "High": "red",
    "Moderate": "yellow",
    "Low": "cyan",
    "Very Low": "green",
}


def format_table(
    forecasts: list[SnowDayForecast],
    console: Console | None = None,
    location: str = "",
) -> None:
    """Print forecasts as a Rich table in date order."""
    if console is None:
        console = Console()

    if not forecasts:
        console.print("[yellow]No daytime forecast periods to score.[/yellow]")
        return

    title = "Snow Day Outlook"
    if location:
        title += f": {location}"
    table = Table(title=title, show_lines=True)

    table.add_column("Day", style="bold", width=16)
    table.add_column("Date", width=10)
    table.add_column("Closure", justify="right", width=8)
    table.add_column("Delay", justify="right", width=8)
    table.add_column("Temp", justify="right", width=5)
    table.add_column("Precip", justify="right", width=6)
    table.add_column("Snow", width=8)
    table.add_column("Note", width=14)
    table.add_column("Forecast", width=48, no_wrap=False)

    for f in forecasts:
        closure_color = _LEVEL_COLORS[f.chance_level]
        delay_color = _LEVEL_COLORS[f.delay_level]
        note = ""
        if f.is_aftermath_day and f.days_since_event is not None:
            note = f"aftermath +{f.days_since_event}d"

        table.add_row(
            f.day_name,
            f.date.strftime("%m/%d"),
            f"[{closure_color}]{f.closure_pct}%[/{closure_color}]",
            f"[{delay_color}]{f.delay_pct}%[/{delay_color}]",
            f"{f.temperature:.0f}°F",
            f"{f.precip_pct}%",
            f.snowfall_display or "",
            note,
            f.forecast_text[:120],
        )

    console.print(table)


def format_json(forecasts: list[SnowDayForecast]) -> str:
    """Format forecasts as a JSON string."""
    return json.dumps(
        [
            {
                "day_name": f.day_name,
                "date": f.date.isoformat(),
                "closure_pct": f.closure_pct,
                "delay_pct": f.delay_pct,
                "chance_level": f.chance_level,
                "delay_level": f.delay_level,
                "temperature": f.temperature,
                "precip_pct": f.precip_pct,
                "snowfall_display": f.snowfall_display,
                "is_aftermath_day": f.is_aftermath_day,
                "days_since_event": f.days_since_event,
                "forecast_text": f.forecast_text,
            }
            for f in forecasts
        ],
        indent=2,
    )


def format_csv(forecasts: list[SnowDayForecast]) -> str:
    """Format forecasts as CSV."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([
        "day_name", "date", "closure_pct", "delay_pct", "chance_level", "delay_level",
        "temperature", "precip_pct", "snowfall_display", "is_aftermath_day",
        "days_since_event",
    ])
    for f in forecasts:
        writer.writerow([
            f.day_name, f.date.isoformat(), f.closure_pct, f.delay_pct,
            f.chance_level, f.delay_level, f.temperature, f.precip_pct,
            f.snowfall_display or "", f.is_aftermath_day,
            "" if f.days_since_event is None else f.days_since_event,
        ])
    return output.getvalue()
