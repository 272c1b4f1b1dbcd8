"""
Prometheus metrics for the place search service.

All collectors live on a dedicated registry so tests and multiple app
instances never collide with the process-wide default registry.
"""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

# Custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

PROVIDER_REQUESTS_TOTAL = Counter(
    "place_search_provider_requests_total",
    "Provider calls by source and outcome",
    ["source", "outcome"],
    registry=REGISTRY,
)

PROVIDER_LATENCY_SECONDS = Histogram(
    "place_search_provider_latency_seconds",
    "Provider call latency in seconds",
    ["source"],
    registry=REGISTRY,
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 3.0, 5.0, 10.0),
)

CACHE_LOOKUPS_TOTAL = Counter(
    "place_search_cache_lookups_total",
    "Result cache lookups by result",
    ["result"],
    registry=REGISTRY,
)

SEARCH_RESULT_COUNT = Histogram(
    "place_search_result_count",
    "Number of places returned per search",
    registry=REGISTRY,
    buckets=(0, 1, 3, 5, 8, 12),
)


def render_latest() -> tuple[bytes, str]:
    """Return the exposition payload and its content type."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
