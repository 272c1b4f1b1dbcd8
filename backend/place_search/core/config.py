# backend/place_search/core/config.py
"""Runtime configuration for the place search service."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Load backend/.env only outside CI; values already set in the shell win.
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists():
        logger.info("[CONFIG] Loading environment from %s", env_path)
        load_dotenv(env_path)


def _secret_value(value: SecretStr | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, SecretStr):
        return value.get_secret_value()
    return str(value)


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix ``PLACE_SEARCH_``)."""

    environment: str = "development"
    log_level: str = "INFO"

    # Upstream credentials. Legacy variable names are still honoured.
    google_maps_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices(
            "PLACE_SEARCH_GOOGLE_MAPS_API_KEY",
            "GOOGLE_MAPS_BACKEND_KEY_NEW",
            "GOOGLE_MAPS_BACKEND_KEY",
            "GOOGLE_MAPS_API_KEY",
            "google_maps_api_key",
        ),
        description="Google Maps key for Places autocomplete/text/nearby/details",
    )
    mapmyindia_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices(
            "PLACE_SEARCH_MAPMYINDIA_API_KEY",
            "MAPMYINDIA_API_KEY",
            "mapmyindia_api_key",
        ),
        description="MapmyIndia Atlas bearer token",
    )

    # "live" queries the real upstreams; "mock" serves canned places (no network).
    place_providers: str = "live"

    google_places_base_url: str = "https://maps.googleapis.com/maps/api"
    mapmyindia_base_url: str = "https://atlas.mapmyindia.com/api/places"
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "place-search/1.0"

    # Every outbound provider call is bounded by this deadline (seconds).
    provider_timeout_seconds: float = Field(default=5.0, gt=0)

    # Fallback search origin when the caller sends no coordinates (Bangalore).
    default_latitude: float = 12.9716
    default_longitude: float = 77.5946

    target_country_code: str = "IN"
    target_country_name: str = "India"
    target_country_alpha3: str = "IND"

    autocomplete_radius_m: int = 50000
    text_search_radius_m: int = 20000
    nearby_radius_m: int = 15000
    nominatim_limit: int = 10
    nominatim_viewbox_degrees: float = 0.5

    min_query_length: int = 2
    text_search_min_query_length: int = 3
    search_result_limit: int = 12

    cache_ttl_seconds: int = 60 * 60
    cache_sweep_threshold: int = 1000

    model_config = SettingsConfigDict(
        env_prefix="PLACE_SEARCH_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def google_key(self) -> str:
        return _secret_value(self.google_maps_api_key)

    @property
    def mapmyindia_key(self) -> str:
        return _secret_value(self.mapmyindia_api_key)


settings = Settings()
