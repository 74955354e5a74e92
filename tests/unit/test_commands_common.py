from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import pytest
import typer
from rich.console import Console

from airaware_cli.commands.common import (
    build_api,
    build_orchestrator,
    get_state,
    progress_payload,
    render_result,
    result_payload,
)
from airaware_cli.core.classify import guidance
from airaware_cli.core.config import ConfigError, load_config
from airaware_cli.core.exercises import build_progress
from airaware_cli.core.models import AirReading, Coordinates, SessionState, SeverityTier
from airaware_cli.core.pipeline import PipelineResult, PipelineStatus
from airaware_cli.core.session import SessionStore
from airaware_cli.core.state import CLIState


@dataclass
class FakeContext:
    obj: Any


def _state(tmp_path: Path, config: Optional[Dict[str, Any]] = None) -> CLIState:
    return CLIState(
        json_output=False,
        plain_output=True,
        verbose=False,
        quiet=False,
        config_path=tmp_path / "config.toml",
        config=config or load_config(tmp_path / "missing.toml"),
        console=Console(record=True),
        store=SessionStore(tmp_path / "state.json"),
    )


def test_get_state_returns_cli_state(tmp_path: Path) -> None:
    state = _state(tmp_path)
    assert get_state(FakeContext(obj=state)) is state


def test_get_state_raises_on_invalid_obj() -> None:
    with pytest.raises(typer.Exit):
        get_state(FakeContext(obj={"not": "state"}))


def test_build_api_uses_configured_settings(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml")
    config["api"]["timeout_seconds"] = 4
    api = build_api(_state(tmp_path, config))
    assert api.timeout_seconds == 4.0
    assert api.air_quality_url.endswith("/v1/air-quality")


def test_build_orchestrator_wires_config(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml")
    config["location"]["default_city"] = "Madrid"
    config["ranking"]["max_workers"] = 2
    state = _state(tmp_path, config)

    here = Coordinates(40.4, -3.7)
    orchestrator = build_orchestrator(state, device_location=here)

    assert orchestrator.default_city == "Madrid"
    assert orchestrator.max_workers == 2
    assert len(orchestrator.ranking_cities) == 8
    assert orchestrator.geolocator is not None and orchestrator.geolocator() == here
    assert orchestrator.store is state.store
    assert build_orchestrator(state).geolocator is None


def test_result_payload_for_success() -> None:
    result = PipelineResult(
        status=PipelineStatus.DONE,
        label="Paris, France",
        city="Paris",
        reading=AirReading(aqi=75, pm10=30.0, pm2_5=20.0),
        tier=SeverityTier.MODERATE,
        guidance=guidance(SeverityTier.MODERATE),
    )
    payload = result_payload(result)
    assert payload["status"] == "done"
    assert payload["location"] == "Paris, France"
    assert payload["tier_label"] == "Moderate"
    assert payload["guidance"] == {
        "recommended": ["Monitor sensitive individuals"],
        "avoid": ["Burning waste outdoors"],
    }


def test_result_payload_for_failure() -> None:
    result = PipelineResult(status=PipelineStatus.FAILED, message="Could not load data. Please try another city.")
    assert result_payload(result) == {
        "status": "failed",
        "message": "Could not load data. Please try another city.",
    }


def test_progress_payload() -> None:
    progress = build_progress(SessionState(completed_exercise_ids={"br1"}, selected_category="breathing"))
    payload = progress_payload(progress)
    assert payload["category"] == "breathing"
    assert payload["exercises"][0] == {"id": "br1", "name": "Deep Belly", "duration": "5 mins", "done": True}
    assert payload["completed_count"] == 1
    assert payload["progress"] == 0.2


def test_build_orchestrator_rejects_bad_ranking_config(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml")
    config["ranking"]["cities"] = [{"name": "Nowhere"}]
    with pytest.raises(ConfigError):
        build_orchestrator(_state(tmp_path, config))

    config = load_config(tmp_path / "missing.toml")
    config["ranking"]["max_workers"] = "many"
    with pytest.raises(ConfigError):
        build_orchestrator(_state(tmp_path, config))


def test_render_result_rejects_result_without_reading(tmp_path: Path) -> None:
    result = PipelineResult(status=PipelineStatus.DONE, label="Paris, France")
    with pytest.raises(ValueError, match="no reading"):
        render_result(_state(tmp_path), result)
    with pytest.raises(ValueError):
        result_payload(result)
