"""Daily exercise checklist commands."""

from __future__ import annotations

from typing import Optional

import typer

from airaware_cli.commands.common import (
    daily_goal,
    get_state,
    print_json_payload,
    progress_payload,
    render_progress,
)
from airaware_cli.core.exercises import all_exercise_ids, build_progress, categories
from airaware_cli.core.state import CLIState

app = typer.Typer(help="Track today's exercises")


def _validate_category(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in categories():
        raise typer.BadParameter(f"category must be one of: {', '.join(categories())}")
    return value


def _show(state: CLIState, category: Optional[str] = None) -> None:
    progress = build_progress(state.store.state, category=category, daily_goal=daily_goal(state))

    if state.store.last_error is not None and not state.json_output:
        state.console.print(f"[yellow]Progress not saved: {state.store.last_error}[/]")

    if state.json_output:
        print_json_payload(state, progress_payload(progress))
        return
    render_progress(state, progress)


@app.command("show")
def show_command(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(
        None,
        "--category",
        help="Category to list (defaults to the selected one)",
        callback=_validate_category,
    ),
) -> None:
    """List exercises with today's completion."""
    _show(get_state(ctx), category)


@app.command("toggle")
def toggle_command(
    ctx: typer.Context,
    exercise_id: str = typer.Argument(..., help="Exercise ID, e.g. wl1"),
) -> None:
    """Mark an exercise done, or undo it."""
    state = get_state(ctx)
    if exercise_id not in set(all_exercise_ids()):
        raise typer.BadParameter(f"Unknown exercise id: {exercise_id}")

    state.store.toggle_exercise(exercise_id)
    _show(state)


@app.command("reset")
def reset_command(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Clear today's progress."""
    state = get_state(ctx)
    if not yes and not typer.confirm("Reset daily progress?"):
        raise typer.Exit(code=0)

    state.store.reset_exercises()
    _show(state)


@app.command("category")
def category_command(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Category key", callback=_validate_category),
) -> None:
    """Select the exercise category."""
    state = get_state(ctx)
    state.store.set_category(key)
    _show(state)
