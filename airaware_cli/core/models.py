"""Lightweight data models used across the pipeline and commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Set, Tuple

from airaware_cli.core.constants import DEFAULT_CATEGORY, TIER_COLORS, TIER_LABELS


class SeverityTier(str, Enum):
    """AQI severity bands, declared from cleanest to most polluted."""

    GOOD = "good"
    MODERATE = "moderate"
    UNHEALTHY_SENSITIVE = "unhealthy_sensitive"
    UNHEALTHY = "unhealthy"
    SEVERE = "severe"

    @property
    def rank(self) -> int:
        return list(SeverityTier).index(self)

    @property
    def label(self) -> str:
        return TIER_LABELS[self.value]

    @property
    def color(self) -> str:
        return TIER_COLORS[self.value]


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class LocationResult:
    """Best geocoding match for a free-text query."""

    coordinates: Coordinates
    display_label: str
    canonical_name: str


@dataclass(frozen=True)
class AirReading:
    aqi: int
    pm10: float
    pm2_5: float


@dataclass(frozen=True)
class Guidance:
    recommended: Tuple[str, ...]
    avoid: Tuple[str, ...]


@dataclass(frozen=True)
class CityRef:
    name: str
    coordinates: Coordinates


@dataclass(frozen=True)
class RankedCityEntry:
    name: str
    aqi: int
    tier: SeverityTier


@dataclass(frozen=True)
class Exercise:
    id: str
    name: str
    duration: str
    icon: str


@dataclass
class SessionState:
    """Persisted per-user session record."""

    current_city: Optional[str] = None
    completed_exercise_ids: Set[str] = field(default_factory=set)
    last_visit_date: Optional[str] = None
    selected_category: str = DEFAULT_CATEGORY
