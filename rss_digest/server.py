"""
RSS Digest API Server

FastAPI application providing endpoints for:
- Ranked summaries of the selected feeds
- Interest and source catalogs
- Source suggestions

Run with:
    uvicorn rss_digest.server:app --port 5005
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .cache import MemoryCache
from .config import config, state
from .feeds import FeedFetcher
from .routes import catalog_router, misc_router, summary_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application resources."""
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    # Startup - skip if already initialized (e.g., by tests)
    if state.fetcher is None:
        state.fetcher = FeedFetcher(
            cache=MemoryCache(max_size=config.FEED_CACHE_MAX_SIZE),
            timeout=config.FEED_TIMEOUT_SECONDS,
            ttl_seconds=config.FEED_CACHE_TTL_SECONDS,
        )
        logger.info(
            f"Feed fetcher initialized (timeout: {config.FEED_TIMEOUT_SECONDS}s, "
            f"cache TTL: {config.FEED_CACHE_TTL_SECONDS}s)"
        )

    yield


app = FastAPI(
    title="RSS Digest API",
    version=__version__,
    lifespan=lifespan
)

# Include routers
app.include_router(misc_router)
app.include_router(catalog_router)
app.include_router(summary_router)
