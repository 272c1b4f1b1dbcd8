"""Provider-agnostic place search interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from dataclasses import dataclass
from enum import Enum
import logging
import time
from typing import Any, ClassVar, Mapping, Optional, Sequence
from uuid import uuid4

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...core.config import Settings
from ...monitoring.prometheus_metrics import PROVIDER_LATENCY_SECONDS, PROVIDER_REQUESTS_TOTAL
from ...utils.geo import distance_km, has_coordinates

logger = logging.getLogger(__name__)

# Confidence never exceeds this when the target country cannot be confirmed.
LOCALE_UNCONFIRMED_CEILING = 0.5


class PlaceSource(str, Enum):
    GOOGLE_AUTOCOMPLETE = "google_autocomplete"
    GOOGLE_TEXT = "google_text"
    GOOGLE_NEARBY = "google_nearby"
    MAPMYINDIA = "mapmyindia"
    NOMINATIM = "nominatim"


# Lower ranks first when distance and confidence tie.
SOURCE_PRIORITY: dict[str, int] = {
    PlaceSource.GOOGLE_AUTOCOMPLETE.value: 1,
    PlaceSource.GOOGLE_TEXT.value: 2,
    PlaceSource.GOOGLE_NEARBY.value: 3,
    PlaceSource.MAPMYINDIA.value: 4,
    PlaceSource.NOMINATIM.value: 5,
}
UNKNOWN_SOURCE_PRIORITY = 99


class PlaceSummary(BaseModel):
    """Public shape of a place candidate."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(min_length=1)
    place_id: str = Field(min_length=1)
    name: str = ""
    address: str = ""
    formatted: str = ""
    locality: str = ""
    city: str = ""
    state: str = ""
    lat: Optional[float] = None
    lng: Optional[float] = None
    confidence: float = 0.0

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return max(0.0, min(1.0, value))


class Place(PlaceSummary):
    """Canonical candidate produced by a provider for a single request."""

    distance: Optional[float] = None
    place_id_synthetic: bool = Field(default=False, exclude=True)

    def summary(self) -> PlaceSummary:
        return PlaceSummary(**self.model_dump(exclude={"distance"}))


@dataclass(frozen=True)
class ProviderError:
    kind: str
    message: str = ""


@dataclass(frozen=True)
class ProviderResult:
    """Outcome of one provider call: places on success, or an error."""

    source: PlaceSource
    places: tuple[Place, ...] = ()
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: PlaceSource, places: Sequence[Place] = ()) -> "ProviderResult":
        return cls(source=source, places=tuple(places))

    @classmethod
    def failure(cls, source: PlaceSource, kind: str, message: str = "") -> "ProviderResult":
        return cls(source=source, error=ProviderError(kind=kind, message=message))


class ProviderResponseError(Exception):
    """Raised when a provider answers with an error status inside a 200 body."""


def synthesize_place_id(source: PlaceSource) -> str:
    """Unique-per-batch id for records the provider returned without one."""
    return f"{source.value}_{int(time.time() * 1000)}_{uuid4().hex[:8]}"


def resolve_place_id(source: PlaceSource, *candidates: str) -> tuple[str, bool]:
    """Return the first non-empty provider id, or a synthesized one."""
    for candidate in candidates:
        if candidate:
            return candidate, False
    return synthesize_place_id(source), True


def adjust_confidence(confidence: float, in_target_country: bool) -> float:
    confidence = min(confidence, 1.0)
    if not in_target_country:
        confidence = min(confidence, LOCALE_UNCONFIRMED_CEILING)
    return max(0.0, confidence)


class PlaceSearchProvider(ABC):
    """
    One upstream search source.

    ``search`` never raises: every failure is reported as an error
    ``ProviderResult`` so one dead provider cannot break an aggregate search.
    Subclasses implement ``_search`` and may raise freely.
    """

    source: ClassVar[PlaceSource]
    requires_location: ClassVar[bool] = False

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        self.http = http
        self.settings = settings
        self.min_query_length = 1

    @property
    def timeout(self) -> float:
        return self.settings.provider_timeout_seconds

    def is_configured(self) -> bool:
        return True

    def accepts_query(self, query: str) -> bool:
        return len(query) >= self.min_query_length

    async def search(
        self, query: str, lat: Optional[float] = None, lng: Optional[float] = None
    ) -> ProviderResult:
        source = self.source.value
        if not self.is_configured():
            PROVIDER_REQUESTS_TOTAL.labels(source=source, outcome="not_configured").inc()
            return ProviderResult.failure(self.source, "not_configured", "credentials missing")
        if self.requires_location and not has_coordinates(lat, lng):
            logger.debug("%s skipped: caller supplied no coordinates", source)
            return ProviderResult.success(self.source)

        started = time.monotonic()
        try:
            places = await asyncio.wait_for(self._search(query, lat, lng), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return self._failed("timeout", f"no response within {self.timeout}s", started)
        except httpx.HTTPStatusError as exc:
            return self._failed("http_status", f"HTTP {exc.response.status_code}", started)
        except httpx.HTTPError as exc:
            return self._failed("transport", str(exc) or exc.__class__.__name__, started)
        except ProviderResponseError as exc:
            return self._failed("provider_status", str(exc), started)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            return self._failed("malformed", str(exc), started)

        PROVIDER_LATENCY_SECONDS.labels(source=source).observe(time.monotonic() - started)
        PROVIDER_REQUESTS_TOTAL.labels(source=source, outcome="ok").inc()
        return ProviderResult.success(self.source, [self._with_distance(p, lat, lng) for p in places])

    @abstractmethod
    async def _search(
        self, query: str, lat: Optional[float], lng: Optional[float]
    ) -> list[Place]:
        pass

    async def _get_json(
        self,
        url: str,
        params: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        resp = await self.http.get(url, params=dict(params), headers=headers, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def _failed(self, kind: str, message: str, started: float) -> ProviderResult:
        source = self.source.value
        PROVIDER_LATENCY_SECONDS.labels(source=source).observe(time.monotonic() - started)
        PROVIDER_REQUESTS_TOTAL.labels(source=source, outcome=kind).inc()
        logger.warning("%s search failed (%s): %s", source, kind, message)
        return ProviderResult.failure(self.source, kind, message)

    @staticmethod
    def _with_distance(place: Place, lat: Optional[float], lng: Optional[float]) -> Place:
        if lat is None or lng is None or place.lat is None or place.lng is None:
            return place
        return place.model_copy(update={"distance": distance_km(lat, lng, place.lat, place.lng)})
