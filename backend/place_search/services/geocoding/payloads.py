"""
Typed views of the upstream response bodies.

Only the fields the mappers read are declared; everything else is ignored.
JSON nulls are dropped before validation so declared defaults apply.
Coordinates that are blank or not numeric parse as ``None``, and record lists
are validated one record at a time: a bad record is dropped, its siblings
survive. Only a reply whose outer shape is wrong fails as a whole.
"""

from __future__ import annotations

import logging
import math
from typing import Annotated, Any, Callable, List, Optional, Type, TypeVar

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _lenient_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


Coordinate = Annotated[Optional[float], BeforeValidator(_lenient_float)]


def _records(model: Type[RecordT]) -> Callable[[Any], List[RecordT]]:
    def validate(value: Any) -> List[RecordT]:
        if not isinstance(value, list):
            raise ValueError(f"expected a list of {model.__name__} records")
        records: List[RecordT] = []
        for item in value:
            try:
                records.append(model.model_validate(item))
            except ValidationError as exc:
                logger.debug("Dropping malformed %s record: %s", model.__name__, exc)
        return records

    return validate


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# --- Google Places web service ---------------------------------------------


class GoogleAddressComponent(_Payload):
    long_name: str = ""
    short_name: str = ""
    types: List[str] = []


class GoogleLatLng(_Payload):
    lat: Coordinate = None
    lng: Coordinate = None


class GoogleGeometry(_Payload):
    location: Optional[GoogleLatLng] = None


class GooglePlusCode(_Payload):
    compound_code: str = ""
    global_code: str = ""


class GooglePlaceResult(_Payload):
    """A text/nearby search hit, a details result or a geocoding result."""

    place_id: str = ""
    name: str = ""
    formatted_address: str = ""
    vicinity: str = ""
    geometry: Optional[GoogleGeometry] = None
    address_components: List[GoogleAddressComponent] = []
    plus_code: Optional[GooglePlusCode] = None
    types: List[str] = []


class GoogleStructuredFormatting(_Payload):
    main_text: str = ""
    secondary_text: str = ""


class GooglePredictionTerm(_Payload):
    value: str = ""


class GooglePrediction(_Payload):
    place_id: str = ""
    description: str = ""
    structured_formatting: Optional[GoogleStructuredFormatting] = None
    terms: List[GooglePredictionTerm] = []
    types: List[str] = []


class GoogleResponse(_Payload):
    status: str = ""
    error_message: str = ""
    results: Annotated[List[GooglePlaceResult], BeforeValidator(_records(GooglePlaceResult))] = []
    predictions: Annotated[List[GooglePrediction], BeforeValidator(_records(GooglePrediction))] = []
    result: Optional[GooglePlaceResult] = None


# --- MapmyIndia Atlas ---------------------------------------------------------


class MapmyIndiaCoordinates(_Payload):
    latitude: Coordinate = None
    lat: Coordinate = None
    longitude: Coordinate = None
    lng: Coordinate = None


class MapmyIndiaPlaceLocation(_Payload):
    coordinates: Optional[MapmyIndiaCoordinates] = None
    latitude: Coordinate = None
    longitude: Coordinate = None
    locality: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    region: str = ""


class MapmyIndiaPlace(_Payload):
    place_id: str = Field(default="", alias="placeId")
    e_loc: str = Field(default="", alias="eLoc")
    id: str = ""
    place_name: str = Field(default="", alias="placeName")
    name: str = ""
    place_address: str = Field(default="", alias="placeAddress")
    formatted_address: str = ""
    description: str = ""
    locality: str = ""
    city: str = ""
    place_city: str = Field(default="", alias="placeCity")
    state: str = ""
    place_state: str = Field(default="", alias="placeState")
    country: str = ""
    region: str = ""
    latitude: Coordinate = None
    longitude: Coordinate = None
    lat: Coordinate = None
    lng: Coordinate = None
    place_location: Optional[MapmyIndiaPlaceLocation] = Field(default=None, alias="placeLocation")


class MapmyIndiaResponse(_Payload):
    suggested_locations: Annotated[
        List[MapmyIndiaPlace], BeforeValidator(_records(MapmyIndiaPlace))
    ] = Field(default=[], alias="suggestedLocations")
    results: Annotated[List[MapmyIndiaPlace], BeforeValidator(_records(MapmyIndiaPlace))] = []


# --- OpenStreetMap Nominatim -------------------------------------------------


class NominatimAddress(_Payload):
    suburb: str = ""
    neighbourhood: str = ""
    city: str = ""
    town: str = ""
    village: str = ""
    state_district: str = ""
    county: str = ""
    state: str = ""
    country: str = ""
    country_code: str = ""


class NominatimPlace(_Payload):
    place_id: str = ""
    osm_id: str = ""
    name: str = ""
    display_name: str = ""
    lat: Coordinate = None
    lon: Coordinate = None
    address: Optional[NominatimAddress] = None


NOMINATIM_RESULTS = TypeAdapter(
    Annotated[List[NominatimPlace], BeforeValidator(_records(NominatimPlace))]
)
