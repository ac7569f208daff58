"""
Tests for the source catalog and ad-hoc source handling.
"""

from rss_digest.sources import (
    SOURCES,
    SourceConfig,
    get_sources_by_ids,
    is_known_source_id,
    merge_configs,
    sanitize_source_ids,
    sanitize_source_overrides,
)


def make_source(id: str, feed_url: str, name: str = "Test") -> SourceConfig:
    return SourceConfig(
        id=id,
        name=name,
        website_url="https://example.com",
        feed_url=feed_url,
    )


class TestCatalog:
    """Tests for the static catalog."""

    def test_ids_and_feed_urls_are_unique(self):
        """Every id and feed URL should appear once."""
        assert len({s.id for s in SOURCES}) == len(SOURCES)
        assert len({s.feed_url for s in SOURCES}) == len(SOURCES)

    def test_feed_urls_are_absolute_http(self):
        """Every feed URL should be an absolute http(s) URL."""
        assert all(s.feed_url.startswith(("https://", "http://")) for s in SOURCES)

    def test_related_ids_point_to_catalog(self):
        """Related source ids should reference known sources."""
        for source in SOURCES:
            for related_id in source.related_source_ids:
                assert is_known_source_id(related_id), f"{source.id} -> {related_id}"


class TestLookup:
    """Tests for id lookups."""

    def test_is_known_source_id(self):
        """Should recognize catalog ids only."""
        assert is_known_source_id("hn-front") is True
        assert is_known_source_id("nope") is False
        assert is_known_source_id(None) is False

    def test_get_by_ids_preserves_order(self):
        """Should follow input order and drop unknown ids."""
        sources = get_sources_by_ids(["lobsters", "missing", "hn-front"])
        assert [s.id for s in sources] == ["lobsters", "hn-front"]

    def test_sanitize_source_ids(self):
        """Should deduplicate and drop unknown or non-string ids."""
        assert sanitize_source_ids(["kotaku", "kotaku", 3, "bogus", "espinof"]) == ["kotaku", "espinof"]
        assert sanitize_source_ids("kotaku") == []


class TestMergeConfigs:
    """Tests for merge_configs."""

    def test_concatenates_distinct_sources(self):
        """Should keep everything when nothing collides."""
        merged = merge_configs([make_source("a", "https://a.com/feed")], [make_source("b", "https://b.com/feed")])
        assert [s.id for s in merged] == ["a", "b"]

    def test_base_wins_on_id_collision(self):
        """Should keep the base source when an override reuses its id."""
        base = make_source("a", "https://a.com/feed", name="Base")
        override = make_source("a", "https://other.com/feed", name="Override")
        merged = merge_configs([base], [override])
        assert merged == [base]

    def test_base_wins_on_feed_url_collision(self):
        """Should keep the base source when an override reuses its feed URL."""
        base = make_source("a", "https://a.com/feed")
        override = make_source("b", "https://a.com/feed")
        assert merge_configs([base], [override]) == [base]


class TestSanitizeSourceOverrides:
    """Tests for sanitize_source_overrides."""

    def test_builds_source(self):
        """Should build a SourceConfig from a camelCase dict."""
        sources = sanitize_source_overrides([{
            "id": "my-blog",
            "name": "  My   Blog ",
            "websiteUrl": "https://blog.example.com",
            "feedUrl": "https://blog.example.com/rss.xml",
            "description": "Notes",
            "topics": ["Rust", "rust", "WASM"],
            "relatedSourceIds": ["hn-front"],
        }])

        assert len(sources) == 1
        source = sources[0]
        assert source.name == "My Blog"
        assert source.feed_url == "https://blog.example.com/rss.xml"
        assert source.topics == ("rust", "wasm")
        assert source.related_source_ids == ()

    def test_accepts_snake_case(self):
        """Should also read snake_case keys."""
        sources = sanitize_source_overrides([{
            "id": "x",
            "name": "X",
            "website_url": "https://x.example.com",
            "feed_url": "https://x.example.com/feed",
        }])
        assert sources[0].website_url == "https://x.example.com"

    def test_drops_invalid_urls(self):
        """Should drop sources with relative, non-http or internal URLs."""
        raw = [
            {"id": "a", "name": "A", "websiteUrl": "https://a.com", "feedUrl": "/feed"},
            {"id": "b", "name": "B", "websiteUrl": "https://b.com", "feedUrl": "ftp://b.com/feed"},
            {"id": "c", "name": "C", "websiteUrl": "https://c.com", "feedUrl": "http://localhost/feed"},
            {"id": "d", "name": "D", "websiteUrl": "https://d.com", "feedUrl": "http://10.0.0.1/feed"},
        ]
        assert sanitize_source_overrides(raw) == []

    def test_drops_missing_fields_and_duplicates(self):
        """Should skip entries without id/name and repeated ids or feed URLs."""
        raw = [
            {"name": "No id", "websiteUrl": "https://a.com", "feedUrl": "https://a.com/feed"},
            {"id": "one", "name": "One", "websiteUrl": "https://a.com", "feedUrl": "https://a.com/feed"},
            {"id": "one", "name": "Again", "websiteUrl": "https://b.com", "feedUrl": "https://b.com/feed"},
            {"id": "two", "name": "Two", "websiteUrl": "https://a.com", "feedUrl": "https://a.com/feed"},
            "garbage",
        ]
        assert [s.id for s in sanitize_source_overrides(raw)] == ["one"]

    def test_caps_topics(self):
        """Should keep at most eight topics."""
        sources = sanitize_source_overrides([{
            "id": "t",
            "name": "T",
            "websiteUrl": "https://t.com",
            "feedUrl": "https://t.com/feed",
            "topics": [f"topic{i}" for i in range(20)],
        }])
        assert len(sources[0].topics) == 8

    def test_rejects_non_list(self):
        """Should return nothing for garbage input."""
        assert sanitize_source_overrides(None) == []
