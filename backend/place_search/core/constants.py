"""Application-wide constants for the place search service."""

from __future__ import annotations

API_TITLE = "Place Search API"
API_VERSION = "1.0.0"
API_DESCRIPTION = (
    "Aggregated place and address search across Google Places, MapmyIndia and "
    "OpenStreetMap Nominatim."
)

# Mount point for versioned routes
API_V1_PREFIX = "/api/v1"
