"""
Aggregated place search.

Fans a query out to every configured provider at once, merges whatever comes
back, drops duplicates, ranks the rest and caches the trimmed list.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from ..core.config import Settings
from ..core.exceptions import ValidationException
from ..monitoring.prometheus_metrics import SEARCH_RESULT_COUNT
from .geocoding.base import Place, PlaceSearchProvider, PlaceSummary, ProviderResult
from .place_cache import PlaceSearchCache
from .place_ranking import dedupe_places, rank_places

logger = logging.getLogger(__name__)


class PlaceSearchService:
    def __init__(
        self,
        providers: Sequence[PlaceSearchProvider],
        cache: PlaceSearchCache,
        settings: Settings,
    ) -> None:
        self.providers = list(providers)
        self.cache = cache
        self.settings = settings

    def validate_query(self, query: Optional[str]) -> str:
        cleaned = (query or "").strip()
        if len(cleaned) < self.settings.min_query_length:
            raise ValidationException(
                f"Query must be at least {self.settings.min_query_length} characters",
                code="invalid_query",
                details={"min_length": self.settings.min_query_length},
            )
        return cleaned

    async def search(
        self, query: Optional[str], lat: Optional[float] = None, lng: Optional[float] = None
    ) -> List[PlaceSummary]:
        """
        Return up to ``search_result_limit`` ranked places for ``query``.

        Raises:
            ValidationException: the query is missing or too short. Nothing
                else escapes; provider trouble yields fewer (or no) results.
        """
        cleaned = self.validate_query(query)
        key = self.cache.build_key(cleaned, lat, lng)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Search cache hit for %r", key)
            return cached

        try:
            results = await self._fan_out(cleaned, lat, lng)
            places = rank_places(dedupe_places(self._flatten(results)))
            summaries = [p.summary() for p in places[: self.settings.search_result_limit]]
            if any(r.ok for r in results):
                self.cache.set(key, summaries)
            else:
                logger.warning("Every provider failed for %r; result not cached", cleaned)
        except Exception:
            logger.exception("Place search failed for %r", cleaned)
            return []

        SEARCH_RESULT_COUNT.observe(len(summaries))
        return summaries

    async def aggregate(
        self, query: str, lat: Optional[float] = None, lng: Optional[float] = None
    ) -> List[Place]:
        """Every successful provider's places, in provider order."""
        return self._flatten(await self._fan_out(query, lat, lng))

    async def _fan_out(
        self, query: str, lat: Optional[float], lng: Optional[float]
    ) -> List[ProviderResult]:
        # One slot per provider, always, in provider order.
        return list(
            await asyncio.gather(*(self._call(provider, query, lat, lng) for provider in self.providers))
        )

    async def _call(
        self,
        provider: PlaceSearchProvider,
        query: str,
        lat: Optional[float],
        lng: Optional[float],
    ) -> ProviderResult:
        if not provider.accepts_query(query):
            return ProviderResult.success(provider.source)
        try:
            return await provider.search(query, lat, lng)
        except Exception as exc:
            logger.exception("%s provider raised unexpectedly", provider.source.value)
            return ProviderResult.failure(provider.source, "unexpected", str(exc))

    @staticmethod
    def _flatten(results: Sequence[ProviderResult]) -> List[Place]:
        return [place for result in results if result.ok for place in result.places]
