"""Unit tests for the TTL cache and cache-key derivation."""

from readmanga.services.cache import Cache, MISSING, compute_key


class TestComputeKey:
    """Cache key derivation."""

    def test_parameter_order_does_not_matter(self):
        first = {"limit": 20, "offset": 0, "title": "berserk"}
        second = {"title": "berserk", "offset": 0, "limit": 20}

        assert compute_key("search", first) == compute_key("search", second)

    def test_pairs_and_mapping_agree(self):
        pairs = [("offset", 40), ("limit", 20)]

        assert compute_key("popular", pairs) == compute_key("popular", {"limit": 20, "offset": 40})

    def test_operation_name_is_part_of_key(self):
        params = {"limit": 20, "offset": 0}

        assert compute_key("search", params) != compute_key("popular", params)

    def test_none_values_are_dropped(self):
        assert compute_key("search", {"title": None, "limit": 20}) == compute_key("search", {"limit": 20})

    def test_empty_params(self):
        assert compute_key("search", {}) == "search_{}"
        assert compute_key("search") == "search_{}"

    def test_list_values_keep_their_order(self):
        key = compute_key("chapters", {"languages": ["fr", "en"]})

        assert key == 'chapters_{"languages":["fr","en"]}'
        assert key != compute_key("chapters", {"languages": ["en", "fr"]})

    def test_key_is_compact_sorted_json(self):
        key = compute_key("chapters", {"offset": 0, "mangaId": "abc"})

        assert key == 'chapters_{"mangaId":"abc","offset":0}'


class TestCache:
    """Cache get/set/expiry behaviour."""

    def test_get_after_set(self, cache):
        cache.set("search_{}", {"data": [1, 2]})

        assert cache.get("search_{}") == {"data": [1, 2]}

    def test_missing_key(self, cache):
        assert cache.get("nope") is MISSING

    def test_falsy_values_are_cached(self, cache):
        cache.set("empty", [])
        cache.set("zero", 0)
        cache.set("none", None)

        assert cache.get("empty") == []
        assert cache.get("zero") == 0
        assert cache.get("none") is None

    def test_expired_entry_is_removed(self, cache, clock):
        cache.set("k", "v")
        clock.advance(301)

        assert cache.get("k") is MISSING
        assert "k" not in cache
        assert cache.size == 0

    def test_ttl_window(self, cache, clock):
        cache.set("search_{}", {"data": ["a"]})

        clock.advance(299)
        assert cache.get("search_{}") == {"data": ["a"]}

        clock.advance(2)
        assert cache.get("search_{}") is MISSING

    def test_entry_still_valid_at_exact_ttl(self, cache, clock):
        cache.set("k", "v")
        clock.advance(300)

        assert cache.get("k") == "v"

    def test_expired_entries_are_not_swept_eagerly(self, cache, clock):
        cache.set("a", 1)
        cache.set("b", 2)
        clock.advance(400)

        assert len(cache) == 2
        cache.get("a")
        assert len(cache) == 1

    def test_set_overwrites_and_restarts_ttl(self, cache, clock):
        cache.set("k", "old")
        clock.advance(200)
        cache.set("k", "new")
        clock.advance(200)

        assert cache.get("k") == "new"
        assert cache.size == 1

    def test_clear(self, cache):
        for i in range(5):
            cache.set(f"k{i}", i)

        cache.clear()

        assert cache.size == 0
        assert all(cache.get(f"k{i}") is MISSING for i in range(5))

    def test_invalidate(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        cache.invalidate("a")
        cache.invalidate("unknown")

        assert cache.get("a") is MISSING
        assert cache.get("b") == 2

    def test_ttl_is_fixed_per_cache(self, clock):
        short = Cache(ttl=10, clock=clock)
        short.set("k", "v")
        clock.advance(11)

        assert short.get("k") is MISSING
