"""Runtime state container for CLI context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from rich.console import Console

from airaware_cli.core.session import SessionStore


@dataclass
class CLIState:
    """CLI runtime options, loaded configuration and the opened session."""

    json_output: bool
    plain_output: bool
    verbose: bool
    quiet: bool
    config_path: Path
    config: Dict[str, Any]
    console: Console
    store: SessionStore
