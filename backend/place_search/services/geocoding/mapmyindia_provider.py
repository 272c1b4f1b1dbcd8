"""MapmyIndia Atlas places search provider."""

import logging
from typing import List, Optional

import httpx

from ...core.config import Settings
from .base import Place, PlaceSearchProvider, PlaceSource, adjust_confidence, resolve_place_id
from .locale import TargetCountry, mapmyindia_place_in_country
from .payloads import MapmyIndiaPlace, MapmyIndiaResponse

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 0.75


def _first_nonzero(*values: Optional[float]) -> Optional[float]:
    # Atlas fills unknown positions with 0, so zero never ends the chain.
    for value in values:
        if value:
            return value
    return None


def _coordinates(place: MapmyIndiaPlace) -> tuple[Optional[float], Optional[float]]:
    location = place.place_location
    nested = location.coordinates if location else None
    lat = _first_nonzero(
        nested.latitude if nested else None,
        nested.lat if nested else None,
        location.latitude if location else None,
        place.latitude,
        place.lat,
    )
    lng = _first_nonzero(
        nested.longitude if nested else None,
        nested.lng if nested else None,
        location.longitude if location else None,
        place.longitude,
        place.lng,
    )
    return lat, lng


def map_mapmyindia_place(place: MapmyIndiaPlace, country: TargetCountry) -> Optional[Place]:
    """Normalize one Atlas record; records without usable coordinates are dropped."""
    lat, lng = _coordinates(place)
    # Atlas reports unknown positions as 0; a real hit never sits on either axis here.
    if not lat or not lng:
        return None

    location = place.place_location
    address = place.place_address or place.formatted_address or place.description
    locality = place.locality or (location.locality if location else "")
    city = place.city or place.place_city or (location.city if location else "")
    state = place.state or place.place_state or (location.state if location else "")

    confidence = BASE_CONFIDENCE
    if address:
        confidence += 0.1
    if locality:
        confidence += 0.05
    if city:
        confidence += 0.1

    place_id, synthetic = resolve_place_id(PlaceSource.MAPMYINDIA, place.place_id, place.e_loc, place.id)
    return Place(
        source=PlaceSource.MAPMYINDIA.value,
        place_id=place_id,
        place_id_synthetic=synthetic,
        name=place.place_name or place.name or address,
        address=address,
        formatted=address,
        locality=locality,
        city=city,
        state=state,
        lat=lat,
        lng=lng,
        confidence=adjust_confidence(confidence, mapmyindia_place_in_country(place, country)),
    )


class MapmyIndiaProvider(PlaceSearchProvider):
    source = PlaceSource.MAPMYINDIA

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__(http, settings)
        self.base_url = settings.mapmyindia_base_url.rstrip("/")
        self.country = TargetCountry.from_settings(settings)

    def is_configured(self) -> bool:
        return bool(self.settings.mapmyindia_key)

    async def _search(self, query: str, lat: Optional[float], lng: Optional[float]) -> List[Place]:
        # Atlas always needs an origin; fall back to the configured city centre.
        origin_lat = lat if lat is not None else self.settings.default_latitude
        origin_lng = lng if lng is not None else self.settings.default_longitude
        data = await self._get_json(
            f"{self.base_url}/search",
            params={"query": query, "location": f"{origin_lat},{origin_lng}"},
            headers={
                "Authorization": f"Bearer {self.settings.mapmyindia_key}",
                "Content-Type": "application/json",
            },
        )
        payload = MapmyIndiaResponse.model_validate(data)
        records = payload.suggested_locations or payload.results
        mapped = (map_mapmyindia_place(record, self.country) for record in records)
        places = [place for place in mapped if place is not None]
        if len(places) < len(records):
            logger.debug("Dropped %d MapmyIndia records without coordinates", len(records) - len(places))
        return places
