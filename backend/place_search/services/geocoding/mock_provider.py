"""Mock place providers for unit tests and offline development (no network calls)."""

from typing import List, Optional, Sequence

import httpx

from ...core.config import Settings
from .base import Place, PlaceSearchProvider, PlaceSource
from .google_provider import ReverseGeocodedAddress


def _default_places(source: PlaceSource) -> List[Place]:
    # Deterministic Bangalore landmarks, one id space per source
    return [
        Place(
            source=source.value,
            place_id=f"mock:{source.value}:mg_road",
            name="MG Road",
            address="MG Road, Bengaluru, Karnataka, India",
            formatted="MG Road, Bengaluru, Karnataka, India",
            locality="Shanthala Nagar",
            city="Bengaluru",
            state="Karnataka",
            lat=12.9756,
            lng=77.6067,
            confidence=0.9,
        ),
        Place(
            source=source.value,
            place_id=f"mock:{source.value}:cubbon_park",
            name="Cubbon Park",
            address="Kasturba Road, Bengaluru, Karnataka, India",
            formatted="Kasturba Road, Bengaluru, Karnataka, India",
            city="Bengaluru",
            state="Karnataka",
            lat=12.9763,
            lng=77.5929,
            confidence=0.8,
        ),
    ]


class MockPlaceProvider(PlaceSearchProvider):
    """Serves a fixed list of places under the given source."""

    def __init__(
        self,
        http: Optional[httpx.AsyncClient],
        settings: Settings,
        *,
        source: PlaceSource = PlaceSource.NOMINATIM,
        places: Optional[Sequence[Place]] = None,
    ) -> None:
        super().__init__(http, settings)  # type: ignore[arg-type]
        self.source = source  # type: ignore[misc]
        self.places = list(places) if places is not None else _default_places(source)
        self.calls: List[tuple[str, Optional[float], Optional[float]]] = []

    async def _search(self, query: str, lat: Optional[float], lng: Optional[float]) -> List[Place]:
        self.calls.append((query, lat, lng))
        needle = query.strip().lower()
        return [p for p in self.places if needle in p.name.lower() or needle in p.address.lower()]


class MockPlaceResolver:
    async def get_place_details(
        self, place_id: str, session_token: Optional[str] = None
    ) -> Optional[Place]:
        if place_id == "mock:missing":
            return None
        return Place(
            source=PlaceSource.GOOGLE_AUTOCOMPLETE.value,
            place_id=place_id,
            name="MG Road",
            address="MG Road, Bengaluru, Karnataka, India",
            formatted="MG Road, Bengaluru, Karnataka, India",
            city="Bengaluru",
            state="Karnataka",
            lat=12.9756,
            lng=77.6067,
            confidence=0.95,
        )

    async def reverse_geocode(self, lat: float, lng: float) -> Optional[ReverseGeocodedAddress]:
        return ReverseGeocodedAddress(
            address="Reverse Mock Address, Bengaluru, Karnataka, India", lat=lat, lng=lng
        )
