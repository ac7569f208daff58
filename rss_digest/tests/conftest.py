"""
Pytest fixtures shared by the rss_digest tests.
"""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from rss_digest.cache import MemoryCache
from rss_digest.config import state
from rss_digest.feeds import FeedFetcher
from rss_digest.interests import Interest, InterestCategory
from rss_digest.server import app


class FakeClock:
    """Deterministic clock for cache expiry tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    """A clock frozen at a fixed instant."""
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0))


@pytest.fixture
def fetcher(clock):
    """Feed fetcher with an isolated cache driven by the fake clock."""
    return FeedFetcher(cache=MemoryCache(clock=clock))


@pytest.fixture
def interests():
    """The two interests used across the scoring tests."""
    return [
        Interest(
            id="ia",
            label="IA",
            keywords=("llm", "agent"),
            category=InterestCategory.TECH,
            is_built_in=True,
        ),
        Interest(
            id="seguridad",
            label="Seguridad",
            keywords=("cve",),
            category=InterestCategory.TECH,
            is_built_in=True,
        ),
    ]


@pytest.fixture
def client(fetcher):
    """Create a test client whose app uses the isolated fetcher."""
    original_fetcher = state.fetcher
    state.fetcher = fetcher

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    state.fetcher = original_fetcher
