from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
import requests
from typer.testing import CliRunner

from airaware_cli.core.models import CityRef, Coordinates


class MockResponse:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload if payload is not None else {}

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError("request failed", response=self)  # type: ignore[arg-type]

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture(autouse=True)
def isolated_paths(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep config and state files inside the test's temp dir."""
    monkeypatch.setenv("AIRAWARE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("AIRAWARE_CONFIG_FILE", str(tmp_path / "config.toml"))
    monkeypatch.setenv("AIRAWARE_STATE_FILE", str(tmp_path / "data" / "state.json"))
    return tmp_path


@pytest.fixture()
def mock_response():
    return MockResponse


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def state_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "state.json"


@pytest.fixture()
def paris_geocode() -> Dict[str, Any]:
    return {
        "results": [
            {
                "id": 2988507,
                "name": "Paris",
                "latitude": 48.85,
                "longitude": 2.35,
                "country": "France",
            }
        ]
    }


@pytest.fixture()
def paris_air() -> Dict[str, Any]:
    return {"current": {"time": "2026-10-17T10:00", "us_aqi": 75, "pm10": 30, "pm2_5": 20}}


@pytest.fixture()
def fake_http(monkeypatch: pytest.MonkeyPatch) -> Callable[..., List[Dict[str, Any]]]:
    """Route ``requests.request`` by URL substring; returns the list of recorded calls."""

    def _install(routes: Dict[str, Any]) -> List[Dict[str, Any]]:
        calls: List[Dict[str, Any]] = []

        def fake_request(method: str, url: str, params=None, timeout=None, **kwargs):  # type: ignore[no-untyped-def]
            calls.append({"method": method, "url": url, "params": params, "timeout": timeout})
            for fragment, response in routes.items():
                if fragment in url:
                    if callable(response):
                        response = response(params)
                    if isinstance(response, Exception):
                        raise response
                    if hasattr(response, "raise_for_status"):
                        return response
                    return MockResponse(payload=response)
            raise AssertionError(f"unexpected request to {url}")

        monkeypatch.setattr("airaware_cli.core.api.requests.request", fake_request)
        return calls

    return _install


@pytest.fixture()
def three_cities() -> List[CityRef]:
    return [
        CityRef("Alpha", Coordinates(1.0, 1.0)),
        CityRef("Bravo", Coordinates(2.0, 2.0)),
        CityRef("Charlie", Coordinates(3.0, 3.0)),
    ]


@pytest.fixture()
def write_state(state_file: Path):
    def _write(record: Any, key: str = "airaware_v2") -> Path:
        state_file.parent.mkdir(parents=True, exist_ok=True)
        state_file.write_text(json.dumps({key: record}, indent=2) + "\n")
        return state_file

    return _write
