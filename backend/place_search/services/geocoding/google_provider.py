"""Google Places providers: autocomplete, text search, nearby search, details."""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel

from ...core.config import Settings
from ...core.exceptions import ServiceUnavailableException
from ...utils.geo import has_coordinates
from .base import (
    Place,
    PlaceSearchProvider,
    PlaceSource,
    ProviderResponseError,
    adjust_confidence,
    resolve_place_id,
)
from .locale import TargetCountry, google_place_in_country, google_prediction_in_country
from .payloads import GoogleAddressComponent, GooglePlaceResult, GooglePrediction, GoogleResponse

logger = logging.getLogger(__name__)

GOOGLE_OK_STATUSES = {"OK", "ZERO_RESULTS"}

AUTOCOMPLETE_CONFIDENCE = 0.9
PLACE_BASE_CONFIDENCE = 0.6

REVERSE_RESULT_TYPES = "street_address|premise|subpremise|establishment|point_of_interest"


def _component(components: List[GoogleAddressComponent], *types: str) -> str:
    """Long name of the first component matching the most specific type given."""
    for wanted in types:
        for component in components:
            if wanted in component.types and component.long_name:
                return component.long_name
    return ""


def map_google_prediction(prediction: GooglePrediction, country: TargetCountry) -> Place:
    # Coordinates are resolved later through place details.
    formatting = prediction.structured_formatting
    place_id, synthetic = resolve_place_id(PlaceSource.GOOGLE_AUTOCOMPLETE, prediction.place_id)
    return Place(
        source=PlaceSource.GOOGLE_AUTOCOMPLETE.value,
        place_id=place_id,
        place_id_synthetic=synthetic,
        name=(formatting.main_text if formatting else "") or prediction.description,
        address=prediction.description,
        formatted=prediction.description,
        lat=None,
        lng=None,
        confidence=adjust_confidence(
            AUTOCOMPLETE_CONFIDENCE, google_prediction_in_country(prediction, country)
        ),
    )


def map_google_place(
    result: GooglePlaceResult, source: PlaceSource, country: TargetCountry
) -> Optional[Place]:
    """Map a text/nearby/details result; results without a location are dropped."""
    location = result.geometry.location if result.geometry else None
    if location is None or location.lat is None or location.lng is None:
        return None

    components = result.address_components
    locality = _component(components, "locality", "sublocality", "sublocality_level_1")
    city = _component(components, "administrative_area_level_2", "locality")
    state = _component(components, "administrative_area_level_1")
    address = result.formatted_address or result.vicinity or result.name

    confidence = PLACE_BASE_CONFIDENCE
    if result.formatted_address:
        confidence += 0.15
    if locality:
        confidence += 0.1
    if city:
        confidence += 0.1
    if state:
        confidence += 0.05

    place_id, synthetic = resolve_place_id(source, result.place_id)
    return Place(
        source=source.value,
        place_id=place_id,
        place_id_synthetic=synthetic,
        name=result.name,
        address=address,
        formatted=address,
        locality=locality,
        city=city,
        state=state,
        lat=location.lat,
        lng=location.lng,
        confidence=adjust_confidence(confidence, google_place_in_country(result, country)),
    )


class GooglePlacesProvider(PlaceSearchProvider):
    """Shared request plumbing for the Google Places web service."""

    endpoint: str = ""

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__(http, settings)
        self.base_url = settings.google_places_base_url.rstrip("/")
        self.country = TargetCountry.from_settings(settings)

    def is_configured(self) -> bool:
        return bool(self.settings.google_key)

    async def _fetch(self, params: dict[str, Any]) -> GoogleResponse:
        data = await self._get_json(
            f"{self.base_url}/{self.endpoint}/json",
            params={**params, "key": self.settings.google_key},
        )
        payload = GoogleResponse.model_validate(data)
        if payload.status not in GOOGLE_OK_STATUSES:
            raise ProviderResponseError(
                f"{payload.status or 'missing status'} {payload.error_message}".strip()
            )
        return payload


class GoogleAutocompleteProvider(GooglePlacesProvider):
    source = PlaceSource.GOOGLE_AUTOCOMPLETE
    endpoint = "place/autocomplete"

    async def _search(self, query: str, lat: Optional[float], lng: Optional[float]) -> List[Place]:
        params: dict[str, Any] = {
            "input": query,
            "components": f"country:{self.country.code.lower()}",
        }
        if has_coordinates(lat, lng):
            params["location"] = f"{lat},{lng}"
            params["radius"] = self.settings.autocomplete_radius_m
        payload = await self._fetch(params)
        return [map_google_prediction(p, self.country) for p in payload.predictions]


class GoogleTextSearchProvider(GooglePlacesProvider):
    source = PlaceSource.GOOGLE_TEXT
    endpoint = "place/textsearch"

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        super().__init__(http, settings)
        self.min_query_length = settings.text_search_min_query_length

    async def _search(self, query: str, lat: Optional[float], lng: Optional[float]) -> List[Place]:
        params: dict[str, Any] = {"query": query, "region": self.country.code.lower()}
        if has_coordinates(lat, lng):
            params["location"] = f"{lat},{lng}"
            params["radius"] = self.settings.text_search_radius_m
        payload = await self._fetch(params)
        mapped = (map_google_place(r, self.source, self.country) for r in payload.results)
        return [place for place in mapped if place is not None]


class GoogleNearbySearchProvider(GooglePlacesProvider):
    source = PlaceSource.GOOGLE_NEARBY
    endpoint = "place/nearbysearch"
    requires_location = True

    async def _search(self, query: str, lat: Optional[float], lng: Optional[float]) -> List[Place]:
        payload = await self._fetch(
            {
                "location": f"{lat},{lng}",
                "radius": self.settings.nearby_radius_m,
                "keyword": query,
            }
        )
        mapped = (map_google_place(r, self.source, self.country) for r in payload.results)
        return [place for place in mapped if place is not None]


class ReverseGeocodedAddress(BaseModel):
    address: str
    lat: float
    lng: float


class GooglePlaceResolver:
    """
    Point lookups that complement search.

    Autocomplete predictions carry no coordinates; ``get_place_details``
    resolves one into a full record. ``reverse_geocode`` turns a map pin into
    display text, preferring a result inside the target country.
    """

    def __init__(self, http: httpx.AsyncClient, settings: Settings) -> None:
        self.http = http
        self.settings = settings
        self.base_url = settings.google_places_base_url.rstrip("/")
        self.country = TargetCountry.from_settings(settings)

    async def get_place_details(
        self, place_id: str, session_token: Optional[str] = None
    ) -> Optional[Place]:
        params: dict[str, Any] = {
            "place_id": place_id,
            "fields": "geometry,formatted_address,address_components,place_id,name",
        }
        if session_token:
            # Groups the details call with its autocomplete keystrokes for billing.
            params["sessiontoken"] = session_token
        payload = await self._get("place/details", params)
        if payload.status != "OK" or payload.result is None:
            logger.warning("Google place details status %s for %s", payload.status, place_id)
            return None
        return map_google_place(payload.result, PlaceSource.GOOGLE_AUTOCOMPLETE, self.country)

    async def reverse_geocode(self, lat: float, lng: float) -> Optional[ReverseGeocodedAddress]:
        payload = await self._get(
            "geocode",
            {"latlng": f"{lat},{lng}", "result_type": REVERSE_RESULT_TYPES},
        )
        if payload.status != "OK" or not payload.results:
            return None
        result = next(
            (r for r in payload.results if google_place_in_country(r, self.country)),
            payload.results[0],
        )
        location = result.geometry.location if result.geometry else None
        located = location is not None and location.lat is not None and location.lng is not None
        return ReverseGeocodedAddress(
            address=result.formatted_address or f"{lat}, {lng}",
            lat=location.lat if located else lat,
            lng=location.lng if located else lng,
        )

    async def _get(self, endpoint: str, params: dict[str, Any]) -> GoogleResponse:
        if not self.settings.google_key:
            raise ServiceUnavailableException(
                "Google Maps API key not configured", code="provider_not_configured"
            )
        try:
            resp = await self.http.get(
                f"{self.base_url}/{endpoint}/json",
                params={**params, "key": self.settings.google_key},
                timeout=self.settings.provider_timeout_seconds,
            )
            resp.raise_for_status()
            return GoogleResponse.model_validate(resp.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Google %s lookup failed: %s", endpoint, exc)
            raise ServiceUnavailableException(
                "Place lookup temporarily unavailable", code="provider_unavailable"
            ) from exc
