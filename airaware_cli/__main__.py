"""Entry point for airaware."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from airaware_cli import __version__
from airaware_cli.commands import exercises as exercise_commands
from airaware_cli.commands.air import locate_command, now_command, rank_command, search_command
from airaware_cli.core.config import (
    ConfigError,
    default_config_path,
    load_config,
    resolve_state_file,
)
from airaware_cli.core.session import SessionStore
from airaware_cli.core.state import CLIState
from airaware_cli.utils.logs import configure_logging

app = typer.Typer(
    add_completion=False,
    help="Real-time air quality and a daily exercise checklist",
    invoke_without_command=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output JSON where available"),
    plain_output: bool = typer.Option(
        False,
        "--plain",
        help="Output plain text (no rich formatting/tables)",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Quiet output"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Initialize global CLI state and open the session."""
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if json_output and plain_output:
        typer.echo("Options --json and --plain are mutually exclusive.")
        raise typer.Exit(code=2)

    cfg_path = (config or default_config_path()).expanduser().resolve()
    try:
        cfg = load_config(cfg_path)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}")
        raise typer.Exit(code=2)

    configure_logging(verbose=verbose, quiet=quiet)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    console = Console(
        quiet=quiet,
        no_color=plain_output,
        log_time=False,
        log_path=False,
    )
    store = SessionStore(resolve_state_file(cfg))
    store.load()
    store.check_daily_reset()

    ctx.obj = CLIState(
        json_output=(json_output and not plain_output),
        plain_output=plain_output,
        verbose=verbose,
        quiet=quiet,
        config_path=cfg_path,
        config=cfg,
        console=console,
        store=store,
    )


app.command("now")(now_command)
app.command("search")(search_command)
app.command("locate")(locate_command)
app.command("rank")(rank_command)
app.add_typer(exercise_commands.app, name="exercises")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
