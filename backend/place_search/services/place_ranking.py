"""Deduplication and ordering of aggregated place candidates."""

from __future__ import annotations

from typing import Iterable, List

from .geocoding.base import SOURCE_PRIORITY, UNKNOWN_SOURCE_PRIORITY, Place


def identity_key(place: Place) -> str:
    """Provider id when it is real, otherwise name plus coordinates."""
    if place.place_id and not place.place_id_synthetic:
        return place.place_id
    return f"{place.name}|{place.lat}|{place.lng}"


def dedupe_places(places: Iterable[Place]) -> List[Place]:
    """Keep the first record seen for each identity key; fields are never merged."""
    seen: set[str] = set()
    unique: List[Place] = []
    for place in places:
        key = identity_key(place)
        if key in seen:
            continue
        seen.add(key)
        unique.append(place)
    return unique


def _rank_key(place: Place) -> tuple[bool, float, float, int]:
    return (
        place.distance is None,
        place.distance if place.distance is not None else 0.0,
        -place.confidence,
        SOURCE_PRIORITY.get(place.source, UNKNOWN_SOURCE_PRIORITY),
    )


def rank_places(places: Iterable[Place]) -> List[Place]:
    """
    Order candidates for display.

    Known distances come first, nearest first; then higher confidence; then
    source priority. ``sorted`` is stable, so full ties keep arrival order.
    """
    return sorted(places, key=_rank_key)
