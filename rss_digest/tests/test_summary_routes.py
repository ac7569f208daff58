"""
Tests for the summary route.
"""

from unittest.mock import AsyncMock, patch

import aiohttp

FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Hacker News</title>
    <link>https://news.ycombinator.com</link>
    <description>Front page</description>
    <item>
      <title>An LLM agent that writes its own tests</title>
      <link>https://example.com/agent?utm_source=hn</link>
      <guid>hn-1</guid>
      <pubDate>Fri, 02 Jan 2026 10:00:00 GMT</pubDate>
      <description>&lt;p&gt;A look at agent tooling.&lt;/p&gt;</description>
    </item>
    <item>
      <title>Sourdough at altitude</title>
      <link>https://example.com/bread</link>
      <guid>hn-2</guid>
    </item>
  </channel>
</rss>
"""


class TestCreateSummary:
    """Tests for POST /api/summary."""

    def test_returns_ranked_items(self, client, fetcher):
        """Should return matching items with camelCase fields."""
        with patch.object(fetcher, "_download", AsyncMock(return_value=FEED)):
            response = client.post("/api/summary", json={
                "interests": ["ia"],
                "sources": ["hn-front"],
            })

        assert response.status_code == 200
        data = response.json()

        assert data["stats"] == {"totalCandidates": 2, "totalReturned": 1}
        assert data["limits"] == {
            "maxItemsPerSource": 20,
            "maxTotalItems": 50,
            "maxKeywordsPerInterest": 12,
        }
        assert data["warnings"] == []
        assert data["email"] is None
        assert [i["id"] for i in data["interests"]] == ["ia"]
        assert [s["id"] for s in data["sources"]] == ["hn-front"]
        assert "generatedAt" in data

        item = data["items"][0]
        assert item["id"] == "hn-1"
        assert item["link"] == "https://example.com/agent"
        assert item["sourceId"] == "hn-front"
        assert item["source"] == "Hacker News"
        assert item["publishedAt"] == "2026-01-02T10:00:00+00:00"
        assert item["matchedKeywords"] == ["llm", "agent"]
        assert item["matchedInterests"] == [{"id": "ia", "label": "IA"}]
        assert item["score"] == 4
        assert item["summary"].startswith("A look at agent tooling.")

    def test_suggests_unselected_sources(self, client, fetcher):
        """Suggested sources should never include the selection."""
        with patch.object(fetcher, "_download", AsyncMock(return_value=FEED)):
            response = client.post("/api/summary", json={
                "interests": ["ia"],
                "sources": ["hn-front"],
            })

        suggested = response.json()["suggestedSources"]
        assert 0 < len(suggested) <= 4
        assert "hn-front" not in {s["id"] for s in suggested}

    def test_failing_source_becomes_warning(self, client, fetcher):
        """A failing feed should not fail the request."""
        async def download(url):
            if "lobste.rs" in url:
                raise aiohttp.ClientConnectionError("connection reset")
            return FEED

        with patch.object(fetcher, "_download", AsyncMock(side_effect=download)):
            response = client.post("/api/summary", json={
                "interests": ["ia"],
                "sources": ["hn-front", "lobsters"],
            })

        assert response.status_code == 200
        data = response.json()
        assert data["warnings"] == ["could not read Lobsters: connection reset"]
        assert data["stats"]["totalReturned"] == 1

    def test_accepts_custom_interests_and_overrides(self, client, fetcher):
        """Custom interests and ad-hoc sources should be used as given."""
        download = AsyncMock(return_value=FEED)

        with patch.object(fetcher, "_download", download):
            response = client.post("/api/summary", json={
                "interests": [{"id": "pan", "label": "Pan", "keywords": ["sourdough"], "category": "custom"}],
                "sourceOverrides": [{
                    "id": "my-blog",
                    "name": "My Blog",
                    "websiteUrl": "https://blog.example.com",
                    "feedUrl": "https://blog.example.com/rss.xml",
                }],
                "email": "  reader@example.com ",
            })

        assert response.status_code == 200
        data = response.json()
        download.assert_awaited_once_with("https://blog.example.com/rss.xml")
        assert [s["id"] for s in data["sources"]] == ["my-blog"]
        assert [i["title"] for i in data["items"]] == ["Sourdough at altitude"]
        assert data["items"][0]["source"] == "My Blog"
        assert data["email"] == "reader@example.com"

    def test_requires_an_interest(self, client):
        """Should return 400 when no interest survives sanitization."""
        response = client.post("/api/summary", json={
            "interests": ["not-a-real-interest"],
            "sources": ["hn-front"],
        })
        assert response.status_code == 400
        assert "interest" in response.json()["detail"]

    def test_requires_a_source(self, client):
        """Should return 400 when no source survives sanitization."""
        response = client.post("/api/summary", json={
            "interests": ["ia"],
            "sources": ["unknown"],
            "sourceOverrides": [{"id": "x", "name": "X", "websiteUrl": "https://x.com", "feedUrl": "http://127.0.0.1/"}],
        })
        assert response.status_code == 400
        assert "source" in response.json()["detail"]

    def test_rejects_malformed_body(self, client):
        """Should return 422 when fields have the wrong shape."""
        response = client.post("/api/summary", json={"interests": "ia", "sources": "hn-front"})
        assert response.status_code == 422
