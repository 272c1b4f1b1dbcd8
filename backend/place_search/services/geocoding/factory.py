"""Factory for place search providers."""

import logging
from typing import List, Optional, Union

import httpx

from ...core.config import Settings
from .base import PlaceSearchProvider, PlaceSource
from .google_provider import (
    GoogleAutocompleteProvider,
    GoogleNearbySearchProvider,
    GooglePlaceResolver,
    GoogleTextSearchProvider,
)
from .mapmyindia_provider import MapmyIndiaProvider
from .mock_provider import MockPlaceProvider, MockPlaceResolver
from .nominatim_provider import NominatimProvider

logger = logging.getLogger(__name__)

# Fan-out order; results are flattened in this order before ranking.
LIVE_PROVIDERS = (
    GoogleAutocompleteProvider,
    GoogleTextSearchProvider,
    GoogleNearbySearchProvider,
    MapmyIndiaProvider,
    NominatimProvider,
)


def _mode(settings: Settings, override: Optional[str]) -> str:
    name = (override or settings.place_providers or "live").lower()
    if name not in {"live", "mock"}:
        logger.warning("Unknown place provider mode %r, using live providers", name)
        return "live"
    return name


def create_place_providers(
    http: httpx.AsyncClient, settings: Settings, provider_override: Optional[str] = None
) -> List[PlaceSearchProvider]:
    if _mode(settings, provider_override) == "mock":
        return [MockPlaceProvider(http, settings, source=source) for source in PlaceSource]
    providers: List[PlaceSearchProvider] = [cls(http, settings) for cls in LIVE_PROVIDERS]
    unconfigured = [p.source.value for p in providers if not p.is_configured()]
    if unconfigured:
        logger.info("Place providers without credentials: %s", ", ".join(unconfigured))
    return providers


def create_place_resolver(
    http: httpx.AsyncClient, settings: Settings, provider_override: Optional[str] = None
) -> Union[GooglePlaceResolver, MockPlaceResolver]:
    if _mode(settings, provider_override) == "mock":
        return MockPlaceResolver()
    return GooglePlaceResolver(http, settings)
