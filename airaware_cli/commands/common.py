"""Shared command helpers."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional, Tuple

import typer
from rich.panel import Panel
from rich.table import Table

from airaware_cli.core.api import OpenMeteoAPI
from airaware_cli.core.config import ConfigError
from airaware_cli.core.constants import DAILY_GOAL
from airaware_cli.core.exercises import ExerciseProgress
from airaware_cli.core.models import AirReading, Coordinates, Guidance, SeverityTier
from airaware_cli.core.pipeline import (
    Orchestrator,
    PipelineResult,
    PipelineStatus,
    StatusListener,
)
from airaware_cli.core.ranking import cities_from_config
from airaware_cli.core.state import CLIState
from airaware_cli.utils.formatting import format_pollutant, format_progress_bar, tier_markup

STATUS_MESSAGES = {
    PipelineStatus.RESOLVING: "Loading...",
    PipelineStatus.FETCHING: "Fetching air quality...",
}


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":")))
        return
    state.console.print_json(data=payload)


def daily_goal(state: CLIState) -> int:
    return int(state.config.get("exercises", {}).get("daily_goal", DAILY_GOAL))


def build_api(state: CLIState) -> OpenMeteoAPI:
    api_cfg = state.config.get("api", {})
    try:
        timeout_seconds = float(api_cfg.get("timeout_seconds", 10))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid api timeout_seconds: {api_cfg.get('timeout_seconds')!r}") from exc

    return OpenMeteoAPI(
        geocoding_url=str(api_cfg.get("geocoding_url")),
        air_quality_url=str(api_cfg.get("air_quality_url")),
        timeout_seconds=timeout_seconds,
    )


def build_orchestrator(
    state: CLIState,
    device_location: Optional[Coordinates] = None,
    listener: Optional[StatusListener] = None,
) -> Orchestrator:
    """Wire the pipeline from config; ``device_location`` acts as the geolocator."""
    geolocator: Optional[Callable[[], Coordinates]] = None
    if device_location is not None:
        geolocator = lambda: device_location  # noqa: E731

    ranking_cfg = state.config.get("ranking", {})
    try:
        max_workers = int(ranking_cfg.get("max_workers", 8))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid ranking max_workers: {ranking_cfg.get('max_workers')!r}") from exc

    return Orchestrator(
        api=build_api(state),
        store=state.store,
        default_city=str(state.config.get("location", {}).get("default_city")),
        geolocator=geolocator,
        listener=listener,
        ranking_cities=cities_from_config(ranking_cfg.get("cities", [])),
        max_workers=max_workers,
    )


def _completed_parts(result: PipelineResult) -> Tuple[AirReading, SeverityTier, Guidance]:
    if result.reading is None or result.tier is None or result.guidance is None:
        raise ValueError(f"Pipeline result has no reading (status={result.status.value})")
    return result.reading, result.tier, result.guidance


def result_payload(result: PipelineResult) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"status": result.status.value}
    if not result.ok:
        payload["message"] = result.message
        return payload

    reading, tier, advice = _completed_parts(result)
    payload.update(
        {
            "location": result.label,
            "city": result.city,
            "aqi": reading.aqi,
            "pm10": reading.pm10,
            "pm2_5": reading.pm2_5,
            "tier": tier.value,
            "tier_label": tier.label,
            "guidance": {
                "recommended": list(advice.recommended),
                "avoid": list(advice.avoid),
            },
        }
    )
    return payload


def progress_payload(progress: ExerciseProgress) -> Dict[str, Any]:
    return {
        "category": progress.category,
        "exercises": [
            {
                "id": exercise.id,
                "name": exercise.name,
                "duration": exercise.duration,
                "done": done,
            }
            for exercise, done in progress.exercises
        ],
        "completed_count": progress.completed_count,
        "daily_goal": progress.daily_goal,
        "progress": round(progress.fraction, 4),
    }


def render_result(state: CLIState, result: PipelineResult) -> None:
    """Print a successful pipeline result in plain or rich form."""
    reading, tier, advice = _completed_parts(result)

    if state.plain_output:
        typer.echo(f"location\t{result.label}")
        typer.echo(f"aqi\t{reading.aqi}")
        typer.echo(f"status\t{tier.label}")
        typer.echo(f"pm2_5\t{reading.pm2_5}")
        typer.echo(f"pm10\t{reading.pm10}")
        for item in advice.recommended:
            typer.echo(f"recommended\t{item}")
        for item in advice.avoid:
            typer.echo(f"avoid\t{item}")
        return

    body = "\n".join(
        [
            f"AQI {tier_markup(tier, str(reading.aqi))}  {tier_markup(tier)}",
            f"PM2.5  {format_pollutant(reading.pm2_5)}",
            f"PM10   {format_pollutant(reading.pm10)}",
            "",
            "[bold]Recommended[/]",
            *[f"  • {item}" for item in advice.recommended],
            "[bold]Avoid[/]",
            *[f"  • {item}" for item in advice.avoid],
        ]
    )
    state.console.print(Panel(body, title=str(result.label), border_style=tier.color))


def render_progress(state: CLIState, progress: ExerciseProgress) -> None:
    """Print the exercise checklist and daily progress."""
    if state.plain_output:
        typer.echo(f"category\t{progress.category}")
        for exercise, done in progress.exercises:
            typer.echo(f"{exercise.id}\t{exercise.name}\t{exercise.duration}\t{'done' if done else 'todo'}")
        typer.echo(f"completed\t{progress.completed_count}")
        return

    table = Table(title=f"Exercises: {progress.category}")
    table.add_column("ID")
    table.add_column("Exercise")
    table.add_column("Duration")
    table.add_column("Done")
    for exercise, done in progress.exercises:
        name = f"{exercise.icon} {exercise.name}"
        table.add_row(
            exercise.id,
            f"[green]{name}[/]" if done else name,
            exercise.duration,
            "[green]✓[/]" if done else "",
        )
    state.console.print(table)
    state.console.print(
        f"{format_progress_bar(progress.fraction)} {progress.completed_count} Done Today"
    )
