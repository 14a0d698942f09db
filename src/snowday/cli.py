"""Typer CLI: snowday predict, ledger, classify-alert."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

app = typer.Typer(
    name="snowday",
    help="School closure and delay chances from winter weather forecasts",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    from snowday.config import get_settings

    level = "DEBUG" if verbose else get_settings().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_json(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"cannot read {path}: {exc.strerror or exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(code=1)


@app.command()
def predict(
    forecast: Path = typer.Option(
        ..., "--forecast", "-f",
        help="NWS forecast JSON (gridpoints/.../forecast response)",
    ),
    lat: float = typer.Option(..., "--lat", help="Latitude in degrees north"),
    lon: float = typer.Option(..., "--lon", help="Longitude in degrees east"),
    alerts: Optional[Path] = typer.Option(
        None, "--alerts", "-a",
        help="NWS active alerts JSON (alerts/active response)",
    ),
    history: Optional[Path] = typer.Option(
        None, "--history",
        help="Open-Meteo archive JSON with daily snowfall and temperatures",
    ),
    snowfall: Optional[float] = typer.Option(
        None, "--snowfall",
        help="Average annual snowfall in inches (estimated from latitude if omitted)",
    ),
    state: str = typer.Option("", "--state", help="Two-letter state code"),
    days: Optional[int] = typer.Option(
        None, "--days",
        help="Override the maximum number of days reported (1-14)",
    ),
    output: str = typer.Option(
        "table", "--output", "-o",
        help="Output format: table, json, csv",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log per-day reasoning"),
) -> None:
    """Closure and delay chances for each forecast day."""
    from snowday.config import Settings, get_settings
    from snowday.forecasting.geography import GeographyContext
    from snowday.pipeline import calculate_snow_day_chances
    from snowday.signals.formatters import format_csv, format_json, format_table
    from snowday.weather.nws import parse_alerts, parse_forecast_periods
    from snowday.weather.openmeteo import parse_archive_history

    _configure_logging(verbose)

    if output not in ("table", "json", "csv"):
        _fail(f"unknown output format {output!r} (expected table, json or csv)")

    try:
        settings = get_settings() if days is None else Settings(max_output_days=days)
        periods = parse_forecast_periods(_load_json(forecast))
        active_alerts = parse_alerts(_load_json(alerts)) if alerts else []
        past = parse_archive_history(_load_json(history)) if history else []

        if snowfall is None:
            geography = GeographyContext.from_latitude(state, lat, lon)
        else:
            geography = GeographyContext(
                state=state, latitude=lat, longitude=lon, avg_annual_snowfall=snowfall,
            )

        results = calculate_snow_day_chances(periods, geography, past, active_alerts, settings)
    except ValueError as exc:
        _fail(str(exc))
        return

    if output == "json":
        typer.echo(format_json(results))
    elif output == "csv":
        typer.echo(format_csv(results), nl=False)
    else:
        location = f"{state} ({lat:.2f}, {lon:.2f})" if state else f"({lat:.2f}, {lon:.2f})"
        format_table(results, console, location=location)


@app.command()
def ledger(
    forecast: Optional[Path] = typer.Option(
        None, "--forecast", "-f",
        help="NWS forecast JSON (gridpoints/.../forecast response)",
    ),
    history: Optional[Path] = typer.Option(
        None, "--history",
        help="Open-Meteo archive JSON with daily snowfall and temperatures",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log ledger decisions"),
) -> None:
    """List the winter events found in the forecast and history."""
    from snowday.pipeline import winter_ledger
    from snowday.weather.nws import parse_forecast_periods
    from snowday.weather.openmeteo import parse_archive_history

    _configure_logging(verbose)

    try:
        periods = parse_forecast_periods(_load_json(forecast)) if forecast else []
        past = parse_archive_history(_load_json(history)) if history else []
        events = winter_ledger(periods, past)
    except ValueError as exc:
        _fail(str(exc))
        return

    if not events:
        console.print("[yellow]No winter events in this window.[/yellow]")
        return

    table = Table(title="Winter Events", show_lines=True)
    table.add_column("Date", width=10)
    table.add_column("Effective", justify="right", width=9)
    table.add_column("Snow", justify="right", width=6)
    table.add_column("Ice", justify="right", width=6)
    table.add_column("Kind", width=6)
    table.add_column("Flags", width=20)

    for day in sorted(events):
        event = events[day]
        flags = []
        if event.sticky:
            flags.append("sticky")
        if event.keyword_only:
            flags.append("keyword-only")
        table.add_row(
            day.isoformat(),
            f"{event.effective_amount:.2f}\"",
            f"{event.snow_inches:.1f}\"",
            f"{event.ice_inches:.2f}\"",
            "ice" if event.is_ice_event else "snow",
            ", ".join(flags),
        )

    console.print(table)


@app.command(name="classify-alert")
def classify_alert(
    event: str = typer.Argument(help='NWS event name, e.g. "Winter Storm Warning"'),
) -> None:
    """Show the severity and closure bonus an alert name maps to."""
    from snowday.forecasting.alerts import severity_bonus
    from snowday.weather.nws import classify_alert_severity, is_winter_alert

    severity = classify_alert_severity(event)
    console.print(f"  Event:    {event}")
    console.print(f"  Winter:   {'yes' if is_winter_alert(event) else 'no'}")
    console.print(f"  Severity: [bold]{severity.name}[/bold]")
    console.print(f"  Bonus:    +{severity_bonus(severity)}")


if __name__ == "__main__":
    app()
