"""
Configuration and application state management.
"""

import os
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

if TYPE_CHECKING:
    from .feeds import FeedFetcher

# Load environment variables
load_dotenv()


def _parse_int(value: str | None, default: int) -> int:
    """Parse integer from environment variable."""
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Config:
    """Application configuration from environment."""
    PORT: int = _parse_int(os.getenv("PORT"), 5005)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Feed fetching
    FEED_TIMEOUT_SECONDS: int = _parse_int(os.getenv("FEED_TIMEOUT_SECONDS"), 12)
    FEED_CACHE_TTL_SECONDS: int = _parse_int(os.getenv("FEED_CACHE_TTL_SECONDS"), 600)
    FEED_CACHE_MAX_SIZE: int = _parse_int(os.getenv("FEED_CACHE_MAX_SIZE"), 256)

    # Number of catalog sources suggested alongside each summary
    SUGGESTION_LIMIT: int = _parse_int(os.getenv("SUGGESTION_LIMIT"), 4)


config = Config()


class AppState:
    """Shared application state."""
    fetcher: "FeedFetcher | None" = None


state = AppState()


def get_fetcher() -> "FeedFetcher":
    """Dependency to get the shared feed fetcher."""
    if not state.fetcher:
        raise HTTPException(status_code=500, detail="Feed fetcher not initialized")
    return state.fetcher
