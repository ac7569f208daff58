"""
Feed Fetcher - Fetch, parse and normalize RSS/Atom feeds.

Handles:
- RSS 2.0 and Atom 1.0 formats (via feedparser)
- Per-feed caching with a TTL, keyed by feed URL
- Concurrent fetching of many sources with per-source failure isolation
- Normalization of entries into FeedItem
"""

import asyncio
import logging
import weakref
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import aiohttp
import feedparser

from .cache import CacheBackend, MemoryCache
from .exceptions import FetchError
from .extractors import normalize_whitespace, strip_html, to_text
from .sources import SourceConfig

logger = logging.getLogger(__name__)

MAX_ITEMS_PER_SOURCE = 20
DEFAULT_TIMEOUT_SECONDS = 12
CACHE_TTL_SECONDS = 10 * 60

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)
FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8"

TRACKING_PARAMS = {
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "fbclid",
    "gclid",
}


@dataclass(frozen=True)
class FeedItem:
    """A normalized entry from a feed."""
    id: str
    title: str
    link: str
    source_id: str
    source_name: str
    published_at: datetime | None
    text: str


# ─────────────────────────────────────────────────────────────
# Normalization
# ─────────────────────────────────────────────────────────────

def normalize_url(value: Any) -> str:
    """
    Canonicalize a link for deduplication.

    Lowercases scheme and host, turns an empty path into "/", and drops the
    fragment and tracking query parameters.
    """
    raw = to_text(value).strip()
    if not raw:
        return ""

    try:
        parts = urlsplit(raw)
    except ValueError:
        return raw
    if not parts.scheme or not parts.netloc:
        return raw

    userinfo, at, host = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{host.lower()}"

    query = parts.query
    params = parse_qsl(query, keep_blank_values=True)
    if any(key in TRACKING_PARAMS for key, _ in params):
        query = urlencode([(key, val) for key, val in params if key not in TRACKING_PARAMS])
    return urlunsplit((parts.scheme.lower(), netloc, parts.path or "/", query, ""))


def parse_published(entry: dict) -> datetime | None:
    """Parse the entry date as UTC; feedparser exposes it as a struct_time."""
    for date_field in ("published_parsed", "updated_parsed"):
        date_tuple = entry.get(date_field)
        if date_tuple:
            try:
                return datetime(*date_tuple[:6], tzinfo=timezone.utc)
            except (ValueError, TypeError):
                continue
    return None


def build_item_text(entry: dict) -> str:
    """Concatenate the entry's content fields as plain text."""
    parts = [entry.get("summary")]
    parts.extend(block.get("value") for block in entry.get("content") or [] if isinstance(block, dict))
    parts.append(entry.get("title"))
    return normalize_whitespace(" ".join(strip_html(part) for part in parts if part))


def normalize_entry(entry: dict, source: SourceConfig, index: int) -> FeedItem | None:
    """
    Map a feedparser entry to a FeedItem.

    Returns None when the entry has no title or link.
    """
    title = normalize_whitespace(entry.get("title"))
    link = normalize_url(entry.get("link"))
    if not title or not link:
        return None

    guid = normalize_whitespace(entry.get("id") or entry.get("guid"))
    return FeedItem(
        id=guid or f"{source.id}:{index}:{link}",
        title=title,
        link=link,
        source_id=source.id,
        source_name=source.name,
        published_at=parse_published(entry),
        text=build_item_text(entry),
    )


def parse_feed(content: bytes | str, source: SourceConfig) -> list[FeedItem]:
    """
    Parse a feed document into its first MAX_ITEMS_PER_SOURCE valid items.

    Dropped entries do not count towards the cap.
    """
    parsed = feedparser.parse(content)

    if parsed.bozo and not parsed.entries:
        raise FetchError(source, f"invalid feed ({parsed.get('bozo_exception')})")

    items = []
    for index, entry in enumerate(parsed.entries):
        item = normalize_entry(entry, source, index)
        if item is None:
            continue
        items.append(item)
        if len(items) >= MAX_ITEMS_PER_SOURCE:
            break
    return items


# ─────────────────────────────────────────────────────────────
# Fetcher
# ─────────────────────────────────────────────────────────────

class FeedFetcher:
    """Fetches feeds for sources, caching parsed items per feed URL."""

    def __init__(
        self,
        cache: CacheBackend | None = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        user_agent: str | None = None,
    ):
        self.cache = cache if cache is not None else MemoryCache()
        self.timeout = timeout
        self.ttl_seconds = ttl_seconds
        self.headers = {
            "User-Agent": user_agent or DEFAULT_USER_AGENT,
            "Accept": FEED_ACCEPT,
        }
        # Held only while a fetch for the URL is in flight
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    async def fetch_items(self, source: SourceConfig) -> list[FeedItem]:
        """
        Return the normalized items of a source's feed.

        Served from cache while the entry is fresh; otherwise downloaded,
        parsed and cached for ttl_seconds.

        Raises:
            FetchError: on network failure, timeout or unparsable feed
        """
        key = source.feed_url

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return list(cached)

        # Concurrent misses for the same feed wait for a single download
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        async with lock:
            cached = self.cache.get(key)
            if cached is not None:
                return list(cached)

            logger.info(f"Fetching {source.name} ({key})")
            try:
                content = await self._download(key)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise FetchError(source, e) from e

            items = parse_feed(content, source)
            self.cache.set(key, items, ttl=self.ttl_seconds)
            logger.debug(f"Cached {len(items)} items from {key}")
            return list(items)

    async def fetch_all(
        self, sources: Iterable[SourceConfig]
    ) -> tuple[dict[str, list[FeedItem]], list[FetchError]]:
        """
        Fetch many sources concurrently and wait for all of them.

        Returns the items per source id (in source order, failed sources
        omitted) and the errors of the sources that failed.
        """
        sources = list(sources)
        outcomes = await asyncio.gather(*(self._fetch_safe(source) for source in sources))

        results: dict[str, list[FeedItem]] = {}
        errors: list[FetchError] = []
        for source, outcome in zip(sources, outcomes):
            if isinstance(outcome, FetchError):
                logger.warning(f"Failed to fetch {source.name}: {outcome}")
                errors.append(outcome)
            else:
                results[source.id] = outcome
        return results, errors

    async def _fetch_safe(self, source: SourceConfig) -> list[FeedItem] | FetchError:
        """Fetch a source, returning a FetchError on any failure instead of raising."""
        try:
            return await self.fetch_items(source)
        except FetchError as e:
            return e
        except Exception as e:
            logger.exception(f"Unexpected error fetching {source.name}")
            return FetchError(source, e)

    async def _download(self, url: str) -> bytes:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                headers=self.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as resp:
                resp.raise_for_status()
                return await resp.read()
