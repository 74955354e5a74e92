"""Air-quality commands: now, search, locate, rank."""

from __future__ import annotations

from contextlib import nullcontext
from typing import Callable, NoReturn, Optional

import typer
from rich.table import Table

from airaware_cli.commands.common import (
    STATUS_MESSAGES,
    build_orchestrator,
    daily_goal,
    get_state,
    print_json_payload,
    progress_payload,
    render_progress,
    render_result,
    result_payload,
)
from airaware_cli.core.config import ConfigError, resolve_device_location
from airaware_cli.core.constants import RANKING_ERROR_MESSAGE
from airaware_cli.core.exercises import build_progress
from airaware_cli.core.models import Coordinates
from airaware_cli.core.pipeline import Orchestrator, PipelineResult, PipelineStatus
from airaware_cli.core.ranking import AggregationError
from airaware_cli.core.state import CLIState


def _config_error(exc: ConfigError) -> NoReturn:
    typer.echo(f"Config error: {exc}")
    raise typer.Exit(code=2)


def _run_pipeline(
    state: CLIState,
    request: Callable[[Orchestrator], PipelineResult],
    device_location: Optional[Coordinates] = None,
    message: str = "Loading...",
) -> PipelineResult:
    status_ctx = state.console.status(message) if not state.plain_output else nullcontext()
    with status_ctx as status:

        def _on_status(pipeline_status: PipelineStatus) -> None:
            text = STATUS_MESSAGES.get(pipeline_status)
            if status is not None and text:
                status.update(text)

        try:
            orchestrator = build_orchestrator(state, device_location=device_location, listener=_on_status)
        except ConfigError as exc:
            _config_error(exc)
        return request(orchestrator)


def _report_failure(state: CLIState, message: Optional[str]) -> None:
    if state.plain_output:
        typer.echo("status\terror")
        typer.echo(f"message\t{message}")
    else:
        state.console.print(f"[red]{message}[/]")


def _emit_result(state: CLIState, result: PipelineResult) -> None:
    if state.json_output:
        print_json_payload(state, result_payload(result))
    elif result.ok:
        render_result(state, result)
    else:
        _report_failure(state, result.message)

    if not result.ok:
        raise typer.Exit(code=1)


def now_command(ctx: typer.Context) -> None:
    """Show air quality for the remembered city (or your location) and today's progress."""
    state = get_state(ctx)
    try:
        device_location = resolve_device_location(state.config)
    except ConfigError as exc:
        _config_error(exc)

    result = _run_pipeline(state, lambda orchestrator: orchestrator.resume(), device_location)
    progress = build_progress(state.store.state, daily_goal=daily_goal(state))

    if state.json_output:
        print_json_payload(
            state,
            {"air": result_payload(result), "exercises": progress_payload(progress)},
        )
    else:
        if result.ok:
            render_result(state, result)
        else:
            _report_failure(state, result.message)
        render_progress(state, progress)

    if not result.ok:
        raise typer.Exit(code=1)


def search_command(
    ctx: typer.Context,
    city: str = typer.Argument(..., help="City name to look up"),
) -> None:
    """Look up a city and show its current air quality."""
    state = get_state(ctx)
    query = city.strip()
    if not query:
        raise typer.BadParameter("city must not be empty")

    result = _run_pipeline(state, lambda orchestrator: orchestrator.search(query))
    _emit_result(state, result)


def locate_command(
    ctx: typer.Context,
    latitude: Optional[float] = typer.Option(None, "--lat", help="Device latitude"),
    longitude: Optional[float] = typer.Option(None, "--lon", help="Device longitude"),
) -> None:
    """Show air quality at your position, falling back to the default city."""
    state = get_state(ctx)
    if (latitude is None) != (longitude is None):
        raise typer.BadParameter("--lat and --lon must be given together")

    try:
        device_location = resolve_device_location(state.config, latitude, longitude)
    except ConfigError as exc:
        _config_error(exc)

    result = _run_pipeline(
        state,
        lambda orchestrator: orchestrator.use_geolocation(),
        device_location,
        message="Locating...",
    )
    _emit_result(state, result)


def rank_command(ctx: typer.Context) -> None:
    """Rank the configured world cities by current AQI, most polluted first."""
    state = get_state(ctx)
    try:
        orchestrator = build_orchestrator(state)
    except ConfigError as exc:
        _config_error(exc)

    status_ctx = state.console.status("Loading rankings...") if not state.plain_output else nullcontext()
    try:
        with status_ctx:
            entries = orchestrator.rank()
    except AggregationError as exc:
        if state.json_output:
            print_json_payload(
                state,
                {
                    "status": "error",
                    "message": RANKING_ERROR_MESSAGE,
                    "failed": [name for name, _ in exc.failures],
                },
            )
        else:
            _report_failure(state, RANKING_ERROR_MESSAGE)
        raise typer.Exit(code=1)

    if state.json_output:
        print_json_payload(
            state,
            {
                "cities": [
                    {"rank": idx, "name": entry.name, "aqi": entry.aqi, "tier": entry.tier.value}
                    for idx, entry in enumerate(entries, start=1)
                ]
            },
        )
        return

    if state.plain_output:
        typer.echo("rank\tcity\taqi\tstatus")
        for idx, entry in enumerate(entries, start=1):
            typer.echo(f"{idx}\t{entry.name}\t{entry.aqi}\t{entry.tier.label}")
        return

    table = Table(title="Global AQI ranking")
    table.add_column("#", justify="right")
    table.add_column("City")
    table.add_column("AQI", justify="right")
    table.add_column("Status")
    for idx, entry in enumerate(entries, start=1):
        table.add_row(
            str(idx),
            entry.name,
            f"[bold {entry.tier.color}]{entry.aqi}[/]",
            f"[{entry.tier.color}]{entry.tier.label}[/]",
        )
    state.console.print(table)
