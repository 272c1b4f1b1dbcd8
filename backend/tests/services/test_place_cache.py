from place_search.services.place_cache import PlaceSearchCache


def test_build_key_normalizes_query_and_rounds_coordinates():
    assert PlaceSearchCache.build_key("  MG Road ", 12.97163, 77.59462) == "mg road|12.97|77.59"
    assert PlaceSearchCache.build_key("mg road", None, None) == "mg road|0.0|0.0"


def test_missing_coordinates_share_a_key_with_zero_coordinates():
    assert PlaceSearchCache.build_key("x", None, None) == PlaceSearchCache.build_key("x", 0.0, 0.0)
    assert PlaceSearchCache.build_key("x", None, None) == PlaceSearchCache.build_key("x", 0, 0)


def test_nearby_coordinates_share_a_key():
    assert PlaceSearchCache.build_key("x", 12.971, 77.594) == PlaceSearchCache.build_key("x", 12.9749, 77.5901)


def test_get_returns_stored_data(cache, make_place):
    data = [make_place("p1").summary()]
    cache.set("k", data)
    assert cache.get("k") == data


def test_miss_returns_none(cache):
    assert cache.get("missing") is None


def test_entry_expires_after_ttl(cache, clock, make_place):
    cache.set("k", [make_place("p1").summary()])

    clock.advance(3599)
    assert cache.get("k") is not None

    clock.advance(1)
    assert cache.get("k") is None
    # Evicted by the read that found it expired
    assert len(cache) == 0


def test_overwrite_refreshes_entry(cache, clock, make_place):
    cache.set("k", [make_place("old").summary()])
    clock.advance(3000)
    cache.set("k", [make_place("new").summary()])
    clock.advance(1000)

    assert [p.place_id for p in cache.get("k")] == ["new"]


def test_sweep_only_runs_past_threshold_and_keeps_live_entries(clock, make_place):
    cache = PlaceSearchCache(ttl_seconds=60, sweep_threshold=3, clock=clock)
    summary = [make_place("p").summary()]
    cache.set("a", summary)
    cache.set("b", summary)
    clock.advance(61)
    cache.set("c", summary)
    # At the threshold: nothing swept yet
    assert len(cache) == 3

    cache.set("d", summary)
    assert len(cache) == 2
    assert cache.get("c") is not None and cache.get("d") is not None


def test_sweep_never_evicts_live_entries(clock, make_place):
    cache = PlaceSearchCache(ttl_seconds=60, sweep_threshold=2, clock=clock)
    for key in "abcd":
        cache.set(key, [make_place(key).summary()])
    assert len(cache) == 4


def test_clear(cache, make_place):
    cache.set("k", [make_place("p").summary()])
    cache.clear()
    assert cache.get("k") is None
