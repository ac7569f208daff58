"""
Summary pipeline: turn raw feed items into a ranked digest.

Pipeline: fetch (concurrent) → flatten → deduplicate → score → sort →
truncate → summarize.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from .extractors import normalize_whitespace
from .feeds import MAX_ITEMS_PER_SOURCE, FeedItem
from .interests import Interest

if TYPE_CHECKING:
    from .feeds import FeedFetcher
    from .sources import SourceConfig

logger = logging.getLogger(__name__)

MAX_TOTAL_ITEMS = 50

SUMMARY_MAX_LENGTH = 240
SUMMARY_SENTENCE_START = 170
SUMMARY_TRUNCATE_AT = 237


@dataclass(frozen=True)
class MatchedInterest:
    id: str
    label: str


@dataclass
class ScoredItem:
    """A feed item with its relevance against the selected interests."""
    id: str
    title: str
    link: str
    source_id: str
    source_name: str
    published_at: datetime | None
    text: str
    matched_keywords: list[str] = field(default_factory=list)
    matched_interests: list[MatchedInterest] = field(default_factory=list)
    score: int = 0
    summary: str = ""


@dataclass
class SummaryResult:
    items: list[ScoredItem]
    warnings: list[str]
    total_candidates: int


def _timestamp(value: datetime | None) -> float:
    # Missing dates sort as the oldest
    return value.timestamp() if value else float("-inf")


def get_selected_keywords(interests: Iterable[Interest]) -> list[str]:
    """Union of all interest keywords, lowercased, in first-seen order."""
    keywords: dict[str, None] = {}
    for interest in interests:
        for keyword in interest.keywords:
            normalized = keyword.strip().lower()
            if normalized:
                keywords.setdefault(normalized, None)
    return list(keywords)


def dedupe_items(items: Iterable[FeedItem]) -> list[FeedItem]:
    """
    Remove duplicates by link (or id when the link is empty).

    The most recently published copy wins; on equal dates the first one seen
    is kept.
    """
    by_key: dict[str, FeedItem] = {}
    for item in items:
        key = item.link or item.id
        existing = by_key.get(key)
        if existing is None or _timestamp(item.published_at) > _timestamp(existing.published_at):
            by_key[key] = item
    return list(by_key.values())


def score_item(
    item: FeedItem,
    interests: list[Interest],
    selected_keywords: list[str],
) -> ScoredItem:
    """
    Score an item by literal keyword matches.

    score = matched keywords + 2 × matched interests
    """
    haystack = f"{item.title} {item.text}".lower()

    matched_keywords = [keyword for keyword in selected_keywords if keyword in haystack]
    matched_interests = [
        MatchedInterest(id=interest.id, label=interest.label)
        for interest in interests
        if any(keyword.lower() in haystack for keyword in interest.keywords)
    ]

    return ScoredItem(
        id=item.id,
        title=item.title,
        link=item.link,
        source_id=item.source_id,
        source_name=item.source_name,
        published_at=item.published_at,
        text=item.text,
        matched_keywords=matched_keywords,
        matched_interests=matched_interests,
        score=len(matched_keywords) + 2 * len(matched_interests),
    )


def sort_scored(items: Iterable[ScoredItem]) -> list[ScoredItem]:
    """Highest score first, then newest first."""
    return sorted(items, key=lambda item: (item.score, _timestamp(item.published_at)), reverse=True)


def create_summary(text: str, title: str) -> str:
    """
    Short plain-text blurb for an item.

    Texts longer than 240 characters are cut at the first sentence end
    between characters 170 and 240, or hard-truncated with "...".
    """
    cleaned = normalize_whitespace(text)
    if not cleaned:
        return title

    if len(cleaned) <= SUMMARY_MAX_LENGTH:
        return cleaned

    sentence_cut = cleaned.find(". ", SUMMARY_SENTENCE_START)
    if 0 < sentence_cut <= SUMMARY_MAX_LENGTH:
        return cleaned[:sentence_cut + 1]

    return f"{cleaned[:SUMMARY_TRUNCATE_AT]}..."


async def build_summary(
    interests: list[Interest],
    sources: list["SourceConfig"],
    fetcher: "FeedFetcher",
) -> SummaryResult:
    """
    Build the ranked digest for the selected interests and sources.

    A failing source only adds a warning; the remaining sources still count.
    """
    selected_keywords = get_selected_keywords(interests)

    per_source, errors = await fetcher.fetch_all(sources)
    warnings = [error.warning() for error in errors]

    candidates = dedupe_items(item for items in per_source.values() for item in items)

    scored = [score_item(item, interests, selected_keywords) for item in candidates]
    ranked = sort_scored(item for item in scored if item.score > 0)[:MAX_TOTAL_ITEMS]

    for item in ranked:
        item.summary = create_summary(item.text, item.title)

    logger.info(
        f"Summary built: {len(ranked)} items from {len(candidates)} candidates "
        f"({len(sources)} sources, {len(errors)} failed)"
    )

    return SummaryResult(
        items=ranked,
        warnings=warnings,
        total_candidates=len(candidates),
    )
