"""Open-Meteo geocoding and air-quality client."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional

import requests

from airaware_cli.core.constants import AQI_API_URL, CURRENT_VARIABLES, GEO_API_URL
from airaware_cli.core.models import AirReading, Coordinates, LocationResult

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised for network, HTTP or payload failures on an external call."""


class NotFoundError(RuntimeError):
    """Raised when geocoding yields no candidate for a query."""


def _non_negative(payload: Dict[str, Any], key: str) -> float:
    raw = payload.get(key)
    if raw is None or isinstance(raw, bool):
        raise TransportError(f"Air-quality payload is missing '{key}'")
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise TransportError(f"Air-quality field '{key}' is not numeric: {raw!r}") from exc
    if not math.isfinite(value):
        raise TransportError(f"Air-quality field '{key}' is not finite: {raw!r}")
    if value < 0:
        raise TransportError(f"Air-quality field '{key}' is negative: {value}")
    return value


class OpenMeteoAPI:
    """Thin wrapper around the Open-Meteo geocoding and air-quality endpoints."""

    def __init__(
        self,
        geocoding_url: str = GEO_API_URL,
        air_quality_url: str = AQI_API_URL,
        timeout_seconds: float = 10,
    ) -> None:
        self.geocoding_url = geocoding_url
        self.air_quality_url = air_quality_url
        self.timeout_seconds = timeout_seconds

    def _request(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        logger.debug("GET %s params=%s", url, params)
        try:
            response = requests.request(
                method="GET",
                url=url,
                params=params,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            raise TransportError(f"Request failed for GET {url}: {exc}") from exc

    def resolve(self, query: str) -> LocationResult:
        """Geocode ``query`` to its single best match."""
        name = query.strip()
        if not name:
            raise NotFoundError("Empty city query")

        payload = self._request(
            self.geocoding_url,
            params={"name": name, "count": 1, "language": "en", "format": "json"},
        )
        if not isinstance(payload, dict):
            raise TransportError("Geocoding response is not an object")

        results = payload.get("results")
        if not results:
            raise NotFoundError(f"City not found: {name}")

        if not isinstance(results, list):
            raise TransportError(f"Malformed geocoding results: {results!r}")

        best = results[0]
        try:
            coordinates = Coordinates(
                latitude=float(best["latitude"]),
                longitude=float(best["longitude"]),
            )
            canonical = str(best["name"])
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError(f"Malformed geocoding result: {best!r}") from exc

        country = best.get("country")
        label = f"{canonical}, {country}" if country else canonical
        return LocationResult(coordinates=coordinates, display_label=label, canonical_name=canonical)

    def fetch_current(self, coordinates: Coordinates) -> AirReading:
        """Fetch the current US AQI, PM10 and PM2.5 values at ``coordinates``."""
        payload = self._request(
            self.air_quality_url,
            params={
                "latitude": coordinates.latitude,
                "longitude": coordinates.longitude,
                "current": ",".join(CURRENT_VARIABLES),
            },
        )
        current = payload.get("current") if isinstance(payload, dict) else None
        if not isinstance(current, dict):
            raise TransportError("Air-quality response has no 'current' object")

        return AirReading(
            aqi=int(round(_non_negative(current, "us_aqi"))),
            pm10=_non_negative(current, "pm10"),
            pm2_5=_non_negative(current, "pm2_5"),
        )
