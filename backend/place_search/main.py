# backend/place_search/main.py
"""
Place search API application.

Wires the shared httpx client, the process-wide result cache and the
provider fan-out into a FastAPI app. Run with:

    uvicorn place_search.main:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator, Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
import httpx

from .core.config import Settings, settings as default_settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_V1_PREFIX, API_VERSION
from .errors import register_error_handlers
from .routes import health, prometheus
from .routes.v1 import places as places_v1
from .services.geocoding.factory import create_place_providers, create_place_resolver
from .services.place_cache import PlaceSearchCache
from .services.place_search_service import PlaceSearchService

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    cfg = app_settings or default_settings
    logging.getLogger("place_search").setLevel(cfg.log_level.upper())

    @asynccontextmanager
    async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Build shared clients on startup and close them on shutdown."""
        logger.info(f"{API_TITLE} starting up...")
        logger.info(f"Environment: {cfg.environment} (providers={cfg.place_providers})")

        http = httpx.AsyncClient(
            timeout=httpx.Timeout(cfg.provider_timeout_seconds),
            follow_redirects=True,
        )
        cache = PlaceSearchCache(
            ttl_seconds=cfg.cache_ttl_seconds,
            sweep_threshold=cfg.cache_sweep_threshold,
        )
        app.state.place_search_service = PlaceSearchService(
            create_place_providers(http, cfg), cache, cfg
        )
        app.state.place_resolver = create_place_resolver(http, cfg)
        try:
            yield
        finally:
            await http.aclose()
            logger.info(f"{API_TITLE} shutting down...")

    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=app_lifespan,
    )
    app.state.settings = cfg
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    api_v1 = APIRouter(prefix=API_V1_PREFIX)
    api_v1.include_router(places_v1.router, prefix="/places")
    app.include_router(api_v1)
    app.include_router(health.router)
    app.include_router(prometheus.router)
    return app


app = create_app()
