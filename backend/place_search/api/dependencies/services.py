# backend/place_search/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

The search service and place resolver are built once in the application
lifespan and stored on ``app.state``; these getters hand them to routes.
Tests swap them with ``app.dependency_overrides``.
"""

from typing import Union

from fastapi import Request

from ...services.geocoding.google_provider import GooglePlaceResolver
from ...services.geocoding.mock_provider import MockPlaceResolver
from ...services.place_search_service import PlaceSearchService


def get_place_search_service(request: Request) -> PlaceSearchService:
    service: PlaceSearchService = request.app.state.place_search_service
    return service


def get_place_resolver(request: Request) -> Union[GooglePlaceResolver, MockPlaceResolver]:
    resolver: Union[GooglePlaceResolver, MockPlaceResolver] = request.app.state.place_resolver
    return resolver
