from __future__ import annotations

import json
from pathlib import Path

import pytest

from airaware_cli.core.config import (
    ConfigError,
    _deep_merge,
    default_config_path,
    default_data_dir,
    expand_path,
    load_config,
    resolve_device_location,
    resolve_state_file,
)
from airaware_cli.core.models import Coordinates


def test_deep_merge_nested_dicts() -> None:
    base = {"a": {"b": 1, "c": 2}, "x": 3}
    override = {"a": {"b": 9}, "y": 4}
    merged = _deep_merge(base, override)
    assert merged == {"a": {"b": 9, "c": 2}, "x": 3, "y": 4}
    assert base["a"]["b"] == 1


def test_expand_path_expands_home_and_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AIRAWARE_TMP_PATH", str(tmp_path))
    expanded = expand_path("$AIRAWARE_TMP_PATH/config.toml")
    assert expanded == (tmp_path / "config.toml").resolve()


def test_default_config_path_uses_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "custom.toml"
    monkeypatch.setenv("AIRAWARE_CONFIG_FILE", str(path))
    assert default_config_path() == path.resolve()


def test_default_data_dir_uses_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "airaware-data"
    monkeypatch.setenv("AIRAWARE_DATA_DIR", str(path))
    assert default_data_dir() == path.resolve()


def test_load_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.toml")
    assert cfg["api"]["timeout_seconds"] == 10
    assert cfg["location"]["default_city"] == "London"
    assert len(cfg["ranking"]["cities"]) == 8
    assert cfg["storage"]["state_file"].endswith("state.json")
    assert cfg["exercises"]["daily_goal"] == 5


def test_load_config_from_json(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"api": {"timeout_seconds": 4}, "location": {"default_city": "Oslo"}}))
    cfg = load_config(path)
    assert cfg["api"]["timeout_seconds"] == 4
    assert cfg["location"]["default_city"] == "Oslo"
    assert cfg["api"]["geocoding_url"].startswith("https://geocoding-api")


def test_load_config_from_toml_replaces_city_list(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[location]
default_city = "Berlin"
latitude = 52.52
longitude = 13.41

[[ranking.cities]]
name = "Berlin"
latitude = 52.52
longitude = 13.41
""".strip()
        + "\n"
    )
    cfg = load_config(path)
    assert cfg["location"]["default_city"] == "Berlin"
    assert cfg["ranking"]["cities"] == [{"name": "Berlin", "latitude": 52.52, "longitude": 13.41}]
    assert cfg["ranking"]["max_workers"] == 8


def test_load_config_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{broken")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_invalid_toml_raises(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("[api\ntimeout_seconds = 3")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_non_object_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError, match="object/table"):
        load_config(path)


def test_resolve_state_file_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    state_path = tmp_path / "state.json"
    monkeypatch.setenv("AIRAWARE_STATE_FILE", str(state_path))
    assert resolve_state_file({"storage": {"state_file": "/nope"}}) == state_path.resolve()


def test_resolve_state_file_default_uses_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("AIRAWARE_STATE_FILE", raising=False)
    monkeypatch.setenv("AIRAWARE_DATA_DIR", str(tmp_path / "xdg"))
    assert resolve_state_file({"storage": {}}) == (tmp_path / "xdg" / "state.json").resolve()


def test_resolve_device_location_prefers_explicit_values() -> None:
    cfg = {"location": {"latitude": 1.0, "longitude": 2.0}}
    assert resolve_device_location(cfg, 3.0, 4.0) == Coordinates(3.0, 4.0)
    assert resolve_device_location(cfg) == Coordinates(1.0, 2.0)


def test_resolve_device_location_missing_is_none() -> None:
    assert resolve_device_location({"location": {"latitude": 1.0}}) is None
    assert resolve_device_location({}) is None


def test_resolve_device_location_invalid_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_device_location({"location": {"latitude": "north", "longitude": 2}})
