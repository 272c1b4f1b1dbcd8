"""OpenStreetMap Nominatim provider (keyless fallback)."""

from typing import Any, List, Optional

import httpx

from ...core.config import Settings
from ...utils.geo import has_coordinates
from .base import Place, PlaceSearchProvider, PlaceSource, adjust_confidence, resolve_place_id
from .locale import TargetCountry, nominatim_place_in_country
from .payloads import NOMINATIM_RESULTS, NominatimPlace

BASE_CONFIDENCE = 0.7


def map_nominatim_place(place: NominatimPlace, country: TargetCountry) -> Optional[Place]:
    if place.lat is None or place.lon is None:
        return None

    address = place.address
    locality = (address.suburb or address.neighbourhood) if address else ""
    city = (address.city or address.town or address.village or address.state_district) if address else ""
    state = address.state if address else ""

    confidence = BASE_CONFIDENCE
    for part in (locality, city, state):
        if part:
            confidence += 0.05

    raw_id = place.place_id or place.osm_id
    if raw_id:
        place_id, synthetic = f"{PlaceSource.NOMINATIM.value}_{raw_id}", False
    else:
        place_id, synthetic = resolve_place_id(PlaceSource.NOMINATIM)

    return Place(
        source=PlaceSource.NOMINATIM.value,
        place_id=place_id,
        place_id_synthetic=synthetic,
        name=place.display_name.split(",")[0].strip() or place.name,
        address=place.display_name,
        formatted=place.display_name,
        locality=locality,
        city=city,
        state=state,
        lat=place.lat,
        lng=place.lon,
        confidence=adjust_confidence(confidence, nominatim_place_in_country(place, country)),
    )


class NominatimProvider(PlaceSearchProvider):
    """Free fallback. Nominatim's usage policy requires an identifying User-Agent."""

    source = PlaceSource.NOMINATIM

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__(http, settings)
        self.base_url = settings.nominatim_base_url.rstrip("/")
        self.country = TargetCountry.from_settings(settings)

    async def _search(self, query: str, lat: Optional[float], lng: Optional[float]) -> List[Place]:
        params: dict[str, Any] = {
            "format": "json",
            "q": query,
            "limit": self.settings.nominatim_limit,
            "addressdetails": 1,
            "countrycodes": self.country.code.lower(),
        }
        if has_coordinates(lat, lng):
            span = self.settings.nominatim_viewbox_degrees
            # viewbox is left,top,right,bottom in lon/lat order
            params["viewbox"] = f"{lng - span},{lat + span},{lng + span},{lat - span}"
            params["bounded"] = 1
        data = await self._get_json(
            f"{self.base_url}/search",
            params=params,
            headers={"User-Agent": self.settings.nominatim_user_agent},
        )
        records = NOMINATIM_RESULTS.validate_python(data)
        mapped = (map_nominatim_place(record, self.country) for record in records)
        return [place for place in mapped if place is not None]
