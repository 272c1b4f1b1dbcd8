# backend/tests/conftest.py
"""
Pytest configuration for the place search service.

No test touches the network: upstream HTTP is mocked with respx and the
service layer is exercised with mock providers.
"""

import os
import sys

# Keep a developer's backend/.env out of the test run.
os.environ.setdefault("CI", "1")

# Add the backend directory to Python path so imports work
backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, backend_dir)

from typing import Callable, Optional

import pytest

from place_search.core.config import Settings
from place_search.services.geocoding.base import Place, PlaceSource
from place_search.services.place_cache import PlaceSearchCache


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="test",
        google_maps_api_key="test-google-key",
        mapmyindia_api_key="test-mapmyindia-key",
        provider_timeout_seconds=2.0,
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    return Settings(environment="test", google_maps_api_key="", mapmyindia_api_key="")


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> PlaceSearchCache:
    return PlaceSearchCache(ttl_seconds=3600, sweep_threshold=1000, clock=clock)


@pytest.fixture
def make_place() -> Callable[..., Place]:
    def _make(
        place_id: str = "p1",
        *,
        source: PlaceSource = PlaceSource.NOMINATIM,
        name: str = "MG Road",
        lat: Optional[float] = 12.9756,
        lng: Optional[float] = 77.6067,
        confidence: float = 0.7,
        distance: Optional[float] = None,
        synthetic: bool = False,
    ) -> Place:
        return Place(
            source=source.value,
            place_id=place_id,
            place_id_synthetic=synthetic,
            name=name,
            address=f"{name}, Bengaluru, Karnataka, India",
            formatted=f"{name}, Bengaluru, Karnataka, India",
            city="Bengaluru",
            state="Karnataka",
            lat=lat,
            lng=lng,
            confidence=confidence,
            distance=distance,
        )

    return _make
