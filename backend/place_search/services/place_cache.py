"""In-process TTL cache for aggregated search results."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from threading import Lock
import time
from typing import Callable, Dict, Optional, Sequence

from ..monitoring.prometheus_metrics import CACHE_LOOKUPS_TOTAL
from .geocoding.base import PlaceSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    data: tuple[PlaceSummary, ...]
    stored_at: float


class PlaceSearchCache:
    """
    Query results keyed by normalized query and rounded coordinates.

    One instance is shared per process. Expired entries are evicted by the
    read that finds them; a full sweep only runs after a write pushes the
    size past ``sweep_threshold``.
    """

    def __init__(
        self,
        ttl_seconds: float = 3600,
        sweep_threshold: int = 1000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.sweep_threshold = sweep_threshold
        self._clock = clock
        self._lock = Lock()
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def build_key(query: str, lat: Optional[float], lng: Optional[float]) -> str:
        # Missing coordinates count as 0.0 so both spellings share a key.
        return f"{query.strip().lower()}|{float(round(lat or 0, 2))}|{float(round(lng or 0, 2))}"

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[list[PlaceSummary]]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and now - entry.stored_at >= self.ttl_seconds:
                del self._entries[key]
                entry = None
        if entry is None:
            CACHE_LOOKUPS_TOTAL.labels(result="miss").inc()
            return None
        CACHE_LOOKUPS_TOTAL.labels(result="hit").inc()
        return list(entry.data)

    def set(self, key: str, data: Sequence[PlaceSummary]) -> None:
        now = self._clock()
        with self._lock:
            self._entries[key] = CacheEntry(data=tuple(data), stored_at=now)
            if len(self._entries) > self.sweep_threshold:
                self._sweep(now)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _sweep(self, now: float) -> None:
        # Caller holds the lock. Live entries survive even above the threshold.
        expired = [k for k, e in self._entries.items() if now - e.stored_at >= self.ttl_seconds]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info("Swept %d expired search cache entries", len(expired))
