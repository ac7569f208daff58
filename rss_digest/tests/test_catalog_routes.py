"""
Tests for catalog routes and the health check.
"""

from rss_digest.config import state
from rss_digest.interests import DEFAULT_INTERESTS
from rss_digest.sources import SOURCES


class TestHealthCheck:
    """Tests for /status endpoint."""

    def test_health_check_returns_ok(self, client):
        """Health check should report the fetcher as ready."""
        response = client.get("/status")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data
        assert data["fetcher_ready"] is True


class TestListInterests:
    """Tests for GET /api/interests."""

    def test_lists_builtin_interests(self, client):
        """Should list every built-in interest, tech before friki."""
        response = client.get("/api/interests")
        assert response.status_code == 200
        data = response.json()

        assert len(data) == len(DEFAULT_INTERESTS)
        assert all(i["isBuiltIn"] for i in data)
        categories = [i["category"] for i in data]
        assert categories == sorted(categories, key=["tech", "friki", "custom"].index)


class TestListSources:
    """Tests for GET /api/sources."""

    def test_lists_catalog(self, client):
        """Should return the catalog in order with camelCase fields."""
        response = client.get("/api/sources")
        assert response.status_code == 200
        data = response.json()

        assert [s["id"] for s in data] == [s.id for s in SOURCES]
        assert data[0]["feedUrl"] == "https://hnrss.org/frontpage"
        assert "lobsters" in data[0]["relatedSourceIds"]

    def test_uses_camel_case_keys_only(self, client):
        """Catalog entries should only expose camelCase field names."""
        source = client.get("/api/sources").json()[0]
        interest = client.get("/api/interests").json()[0]

        assert set(source) == {
            "id", "name", "websiteUrl", "feedUrl", "description", "topics", "relatedSourceIds",
        }
        assert set(interest) == {"id", "label", "keywords", "category", "isBuiltIn"}


class TestSuggestSources:
    """Tests for POST /api/sources/suggestions."""

    def test_catalog_and_dynamic_suggestions(self, client):
        """Should combine catalog suggestions and search feeds."""
        response = client.post("/api/sources/suggestions", json={
            "interests": [
                "ia",
                {"id": "formula-1", "label": "Fórmula 1", "keywords": ["f1", "verstappen"], "category": "custom"},
            ],
            "sources": ["hn-front"],
        })

        assert response.status_code == 200
        data = response.json()

        assert 0 < len(data["suggested"]) <= 4
        assert "hn-front" not in {s["id"] for s in data["suggested"]}
        assert [s["id"] for s in data["dynamic"]] == [
            "dynamic-formula-1-gnews",
            "dynamic-formula-1-bing-news",
            "dynamic-formula-1-gnews-global",
        ]

    def test_empty_selection_falls_back_to_catalog(self, client):
        """With nothing selected, suggest the head of the catalog."""
        response = client.post("/api/sources/suggestions", json={"limit": 2})
        assert response.status_code == 200
        data = response.json()
        assert [s["id"] for s in data["suggested"]] == ["hn-front", "lobsters"]
        assert data["dynamic"] == []

    def test_works_without_feed_fetcher(self, client):
        """Suggestions do no network I/O and should not need the fetcher."""
        state.fetcher = None

        response = client.post("/api/sources/suggestions", json={"interests": ["ia"]})

        assert response.status_code == 200
        assert response.json()["suggested"]

    def test_rejects_out_of_range_limit(self, client):
        """Should validate the limit."""
        response = client.post("/api/sources/suggestions", json={"limit": 500})
        assert response.status_code == 422
