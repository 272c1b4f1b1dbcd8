# backend/place_search/routes/v1/places.py
"""
Places routes - API v1

Versioned place lookup endpoints under /api/v1/places.
Search logic is delegated to PlaceSearchService; point lookups to the
place resolver.

Endpoints:
    GET /search                          → Aggregated place search
    GET /expand                          → Legacy alias of /search
    GET /details                         → Resolve a place id to coordinates
    GET /reverse                         → Reverse geocode a map pin
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.services import get_place_resolver, get_place_search_service
from ...core.exceptions import DomainException, NotFoundException, ValidationException
from ...schemas.place import PlaceResponse, ReverseGeocodeResponse
from ...services.geocoding.google_provider import GooglePlaceResolver
from ...services.geocoding.mock_provider import MockPlaceResolver
from ...services.place_search_service import PlaceSearchService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["places"])

PlaceResolver = Union[GooglePlaceResolver, MockPlaceResolver]


async def _search(
    service: PlaceSearchService, q: Optional[str], lat: Optional[float], lng: Optional[float]
) -> List[PlaceResponse]:
    try:
        places = await service.search(q, lat, lng)
    except DomainException as exc:
        raise exc.to_http_exception()
    return [PlaceResponse(**place.model_dump()) for place in places]


@router.get("/search", response_model=List[PlaceResponse])
async def search_places(
    q: Optional[str] = Query(None, description="Free-text query, at least 2 characters"),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    service: PlaceSearchService = Depends(get_place_search_service),
) -> List[PlaceResponse]:
    """Ranked places from every provider; provider outages only shrink the list."""
    return await _search(service, q, lat, lng)


@router.get("/expand", response_model=List[PlaceResponse])
async def expand_places(
    q: Optional[str] = Query(None),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    service: PlaceSearchService = Depends(get_place_search_service),
) -> List[PlaceResponse]:
    return await _search(service, q, lat, lng)


@router.get("/details", response_model=PlaceResponse)
async def place_details(
    place_id: Optional[str] = Query(None),
    session_token: Optional[str] = Query(None, description="Autocomplete session token for billing"),
    resolver: PlaceResolver = Depends(get_place_resolver),
) -> PlaceResponse:
    """Resolve an autocomplete prediction into a record with coordinates."""
    try:
        if not place_id or not place_id.strip():
            raise ValidationException("place_id is required", code="missing_place_id")
        place = await resolver.get_place_details(place_id.strip(), session_token=session_token)
        if place is None:
            raise NotFoundException("Place not found", code="place_not_found")
    except DomainException as exc:
        raise exc.to_http_exception()
    return PlaceResponse(**place.summary().model_dump())


@router.get("/reverse", response_model=ReverseGeocodeResponse)
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    resolver: PlaceResolver = Depends(get_place_resolver),
) -> ReverseGeocodeResponse:
    try:
        result = await resolver.reverse_geocode(lat, lng)
        if result is None:
            raise NotFoundException("No address found for these coordinates", code="address_not_found")
    except DomainException as exc:
        raise exc.to_http_exception()
    return ReverseGeocodeResponse(**result.model_dump())
