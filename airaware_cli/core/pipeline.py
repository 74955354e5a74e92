"""Search/geolocation pipeline: resolve, fetch, classify, commit."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

from airaware_cli.core.api import NotFoundError, OpenMeteoAPI, TransportError
from airaware_cli.core.classify import classify, guidance
from airaware_cli.core.constants import DEFAULT_CITY, GEOLOCATION_LABEL, LOAD_ERROR_MESSAGE
from airaware_cli.core.models import (
    AirReading,
    CityRef,
    Coordinates,
    Guidance,
    RankedCityEntry,
    SeverityTier,
)
from airaware_cli.core.ranking import rank_cities
from airaware_cli.core.session import SessionStore

logger = logging.getLogger(__name__)


class GeolocationError(RuntimeError):
    """Raised by a geolocator that cannot determine the device position."""


Geolocator = Callable[[], Coordinates]
StatusListener = Callable[["PipelineStatus"], None]


class PipelineStatus(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    DONE = "done"
    FAILED = "failed"
    SUPERSEDED = "superseded"


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of one search or geolocation request."""

    status: PipelineStatus
    label: Optional[str] = None
    city: Optional[str] = None
    reading: Optional[AirReading] = None
    tier: Optional[SeverityTier] = None
    guidance: Optional[Guidance] = None
    message: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status is PipelineStatus.DONE


class Orchestrator:
    """Runs one request at a time; a newer request supersedes an older one.

    A superseded request never commits to the session store.
    """

    def __init__(
        self,
        api: OpenMeteoAPI,
        store: SessionStore,
        default_city: str = DEFAULT_CITY,
        geolocator: Optional[Geolocator] = None,
        listener: Optional[StatusListener] = None,
        ranking_cities: Sequence[CityRef] = (),
        max_workers: Optional[int] = None,
    ) -> None:
        self.api = api
        self.store = store
        self.default_city = default_city
        self.geolocator = geolocator
        self.listener = listener
        self.ranking_cities = list(ranking_cities)
        self.max_workers = max_workers
        self.last_result: Optional[PipelineResult] = None
        self._status = PipelineStatus.IDLE
        self._ticket = 0
        self._lock = threading.Lock()

    @property
    def status(self) -> PipelineStatus:
        return self._status

    def _begin(self) -> int:
        with self._lock:
            self._ticket += 1
            return self._ticket

    def _is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._ticket

    def _transition(self, status: PipelineStatus) -> None:
        logger.debug("Pipeline %s -> %s", self._status.value, status.value)
        self._status = status
        if self.listener is not None:
            self.listener(status)

    def _finish(self, result: PipelineResult) -> PipelineResult:
        if result.status is not PipelineStatus.SUPERSEDED:
            self.last_result = result
            self._transition(result.status)
        self._transition(PipelineStatus.IDLE)
        return result

    def _fail(self, ticket: int, exc: Exception) -> PipelineResult:
        if not self._is_current(ticket):
            return self._finish(PipelineResult(status=PipelineStatus.SUPERSEDED, error=exc))
        logger.info("Air-quality request failed: %s", exc)
        return self._finish(
            PipelineResult(status=PipelineStatus.FAILED, message=LOAD_ERROR_MESSAGE, error=exc)
        )

    def _search(self, ticket: int, query: str) -> PipelineResult:
        self._transition(PipelineStatus.RESOLVING)
        try:
            location = self.api.resolve(query)
        except (NotFoundError, TransportError) as exc:
            return self._fail(ticket, exc)
        return self._fetch(
            ticket,
            location.coordinates,
            label=location.display_label,
            city=location.canonical_name,
        )

    def _fetch(
        self,
        ticket: int,
        coordinates: Coordinates,
        label: str,
        city: Optional[str] = None,
    ) -> PipelineResult:
        self._transition(PipelineStatus.FETCHING)
        try:
            reading = self.api.fetch_current(coordinates)
        except TransportError as exc:
            return self._fail(ticket, exc)

        if not self._is_current(ticket):
            logger.debug("Discarding superseded result for %s", label)
            return self._finish(PipelineResult(status=PipelineStatus.SUPERSEDED, label=label))

        tier = classify(reading.aqi)
        if city:
            self.store.set_current_city(city)
        return self._finish(
            PipelineResult(
                status=PipelineStatus.DONE,
                label=label,
                city=city,
                reading=reading,
                tier=tier,
                guidance=guidance(tier),
            )
        )

    def search(self, query: str) -> PipelineResult:
        """Resolve ``query``, fetch its air quality and remember the city."""
        return self._search(self._begin(), query)

    def use_geolocation(self) -> PipelineResult:
        """Fetch air quality at the device position, else the default city."""
        ticket = self._begin()
        if self.geolocator is None:
            logger.info("Geolocation unavailable; using default city %s", self.default_city)
            return self._search(ticket, self.default_city)
        try:
            coordinates = self.geolocator()
        except GeolocationError as exc:
            logger.info("Geolocation failed (%s); using default city %s", exc, self.default_city)
            return self._search(ticket, self.default_city)
        return self._fetch(ticket, coordinates, label=GEOLOCATION_LABEL)

    def resume(self) -> PipelineResult:
        """Reload the remembered city, or locate the device when there is none."""
        city = self.store.state.current_city
        if city:
            return self.search(city)
        return self.use_geolocation()

    def rank(self) -> List[RankedCityEntry]:
        """Rank the configured cities, most polluted first."""
        return rank_cities(self.ranking_cities, self.api.fetch_current, max_workers=self.max_workers)
