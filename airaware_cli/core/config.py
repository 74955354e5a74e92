"""Configuration loading and path resolution."""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # Python 3.9-3.10
    import tomli as tomllib  # type: ignore[no-redef]

from airaware_cli.core.constants import (
    AQI_API_URL,
    DAILY_GOAL,
    DEFAULT_CITY,
    GEO_API_URL,
    RANKING_CITIES,
)
from airaware_cli.core.models import Coordinates


class ConfigError(RuntimeError):
    """Raised when config file parsing fails."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def expand_path(path_str: str) -> Path:
    """Expand user/env vars and return absolute path."""
    return Path(os.path.expandvars(path_str)).expanduser().resolve()


def default_data_dir() -> Path:
    """Resolve XDG-style data directory with env override."""
    raw = os.getenv("AIRAWARE_DATA_DIR", "~/.local/share/airaware")
    return expand_path(raw)


def default_config_path() -> Path:
    """Get default config file path."""
    raw = os.getenv("AIRAWARE_CONFIG_FILE", "~/.config/airaware/config.toml")
    return expand_path(raw)


def _default_config() -> Dict[str, Any]:
    data_dir = default_data_dir()
    return {
        "api": {
            "geocoding_url": GEO_API_URL,
            "air_quality_url": AQI_API_URL,
            "timeout_seconds": 10,
        },
        "location": {
            "default_city": DEFAULT_CITY,
        },
        "ranking": {
            "cities": copy.deepcopy(RANKING_CITIES),
            "max_workers": 8,
        },
        "storage": {
            "state_file": str(data_dir / "state.json"),
        },
        "exercises": {
            "daily_goal": DAILY_GOAL,
        },
    }


def _read_config(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    text = path.read_text()
    try:
        if suffix in {".toml", ""}:
            loaded = tomllib.loads(text)
        else:
            loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    except Exception as exc:
        if suffix in {".toml", ""}:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain an object/table at the root")
    return loaded


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from disk, merged with defaults."""
    cfg_path = path or default_config_path()
    cfg = _default_config()

    if cfg_path.exists():
        cfg = _deep_merge(cfg, _read_config(cfg_path))

    return cfg


def resolve_state_file(config: Dict[str, Any]) -> Path:
    """Resolve session state file path from env/config."""
    raw = os.getenv("AIRAWARE_STATE_FILE") or config.get("storage", {}).get("state_file")
    if not raw:
        raw = str(default_data_dir() / "state.json")
    return expand_path(raw)


def resolve_device_location(
    config: Dict[str, Any],
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Optional[Coordinates]:
    """Resolve the device position with CLI values first, then config.

    Returns None when no complete latitude/longitude pair is available.
    """
    location_cfg = config.get("location", {})
    lat = latitude if latitude is not None else location_cfg.get("latitude")
    lon = longitude if longitude is not None else location_cfg.get("longitude")
    if lat is None or lon is None:
        return None
    try:
        return Coordinates(latitude=float(lat), longitude=float(lon))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid device location: {lat!r}, {lon!r}") from exc
