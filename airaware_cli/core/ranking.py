"""Concurrent multi-city AQI ranking."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from airaware_cli.core.classify import classify
from airaware_cli.core.config import ConfigError
from airaware_cli.core.models import AirReading, CityRef, Coordinates, RankedCityEntry

logger = logging.getLogger(__name__)

Fetcher = Callable[[Coordinates], AirReading]


class AggregationError(RuntimeError):
    """Raised when any city in a ranking batch fails to fetch."""

    def __init__(self, failures: Sequence[Tuple[str, Exception]]) -> None:
        self.failures = list(failures)
        details = "; ".join(f"{name} ({exc})" for name, exc in self.failures)
        super().__init__(f"Ranking failed for {len(self.failures)} city(ies): {details}")


def cities_from_config(entries: Iterable[Dict[str, Any]]) -> List[CityRef]:
    """Build city references from ``{name, latitude, longitude}`` mappings."""
    cities: List[CityRef] = []
    for entry in entries:
        try:
            cities.append(
                CityRef(
                    name=str(entry["name"]),
                    coordinates=Coordinates(
                        latitude=float(entry["latitude"]),
                        longitude=float(entry["longitude"]),
                    ),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid ranking city entry {entry!r}: {exc}") from exc
    return cities


def rank_cities(
    cities: Sequence[CityRef],
    fetch: Fetcher,
    max_workers: Optional[int] = None,
) -> List[RankedCityEntry]:
    """Fetch every city concurrently and return them most polluted first.

    Equal AQI values keep their input order. If any fetch fails, no entries
    are returned and ``AggregationError`` lists every failed city.
    """
    if not cities:
        return []

    workers = max_workers or len(cities)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(fetch, city.coordinates) for city in cities]

    entries: List[RankedCityEntry] = []
    failures: List[Tuple[str, Exception]] = []
    for city, future in zip(cities, futures):
        try:
            reading = future.result()
        except Exception as exc:
            logger.info("Ranking fetch failed for %s: %s", city.name, exc)
            failures.append((city.name, exc))
            continue
        entries.append(RankedCityEntry(name=city.name, aqi=reading.aqi, tier=classify(reading.aqi)))

    if failures:
        raise AggregationError(failures)

    return sorted(entries, key=lambda entry: entry.aqi, reverse=True)
