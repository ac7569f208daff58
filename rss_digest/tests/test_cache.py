"""
Tests for the in-memory TTL cache.
"""

from rss_digest.cache import MemoryCache


class TestMemoryCache:
    """Tests for MemoryCache."""

    def test_get_missing_returns_none(self, clock):
        """Should return None for unknown keys."""
        cache = MemoryCache(clock=clock)
        assert cache.get("nope") is None

    def test_serves_until_expiry(self, clock):
        """Should serve while now < expires_at and drop the entry after."""
        cache = MemoryCache(clock=clock)
        cache.set("feed", [1, 2], ttl=600)

        clock.advance(599)
        assert cache.get("feed") == [1, 2]

        clock.advance(1)
        assert cache.get("feed") is None
        assert cache.size == 0

    def test_no_ttl_never_expires(self, clock):
        """Should keep entries without TTL."""
        cache = MemoryCache(clock=clock)
        cache.set("feed", "value")
        clock.advance(10 ** 6)
        assert cache.get("feed") == "value"

    def test_set_replaces_entry(self, clock):
        """Should replace the whole entry and restart its TTL."""
        cache = MemoryCache(clock=clock)
        cache.set("feed", "old", ttl=10)
        clock.advance(8)
        cache.set("feed", "new", ttl=10)
        clock.advance(8)
        assert cache.get("feed") == "new"

    def test_evicts_least_recently_used(self, clock):
        """Should evict the least recently used key at capacity."""
        cache = MemoryCache(max_size=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)

        assert cache.get("a") == 1
        assert cache.get("b") is None
        assert cache.get("c") == 3

    def test_delete_and_clear(self, clock):
        """Should remove single entries and everything."""
        cache = MemoryCache(clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.delete("a")
        assert cache.get("a") is None
        cache.clear()
        assert cache.size == 0
