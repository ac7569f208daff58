"""
Source recommendations: which other feeds fit the user's current setup.

Two strategies:
1. Catalog scoring (suggest_sources) - rank unselected catalog sources by
   topic overlap with the selected interests and sources, plus the curated
   "related source" graph.
2. Search feeds (build_real_rss_recommendations) - for custom interests the
   catalog cannot cover, synthesize news-search RSS URLs from the interest
   terms.

Both are pure functions over the catalog and their inputs.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable
from urllib.parse import quote

from .extractors import fold_text
from .interests import Interest, InterestCategory
from .sources import SOURCES, SourceConfig

DEFAULT_SUGGESTION_LIMIT = 4
DEFAULT_DYNAMIC_LIMIT = 6

TOPIC_MATCH_SCORE = 4
TEXT_MATCH_SCORE = 1
TEXT_MATCH_MIN_LENGTH = 4
SHARED_TOPIC_SCORE = 2
RELATED_FROM_SELECTION_SCORE = 6
RELATED_TO_SELECTION_SCORE = 3

MAX_QUERY_TERMS = 4

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _encode_query(query: str) -> str:
    # Same escaping as JavaScript's encodeURIComponent
    return quote(query, safe="-_.!~*'()")


@dataclass(frozen=True)
class SearchFeedTemplate:
    """A news search engine that exposes results as RSS."""
    suffix: str
    name_prefix: str
    website_url: str
    description: str
    build_feed_url: Callable[[str], str]


SEARCH_FEED_TEMPLATES: list[SearchFeedTemplate] = [
    SearchFeedTemplate(
        suffix="gnews",
        name_prefix="Google News",
        website_url="https://news.google.com",
        description="Búsqueda de noticias en tiempo real usando Google News RSS.",
        build_feed_url=lambda query: (
            f"https://news.google.com/rss/search?q={_encode_query(query)}&hl=es-419&gl=ES&ceid=ES:es"
        ),
    ),
    SearchFeedTemplate(
        suffix="bing-news",
        name_prefix="Bing News",
        website_url="https://www.bing.com/news",
        description="Búsqueda de noticias usando el feed RSS de Bing News.",
        build_feed_url=lambda query: (
            f"https://www.bing.com/news/search?q={_encode_query(query)}&format=RSS"
        ),
    ),
    SearchFeedTemplate(
        suffix="gnews-global",
        name_prefix="Google News Global",
        website_url="https://news.google.com",
        description="Búsqueda de noticias globales en Google News RSS.",
        build_feed_url=lambda query: (
            f"https://news.google.com/rss/search?q={_encode_query(query)}&hl=en-US&gl=US&ceid=US:en"
        ),
    ),
]


# ─────────────────────────────────────────────────────────────
# Catalog scoring
# ─────────────────────────────────────────────────────────────

def build_interest_tokens(interests: Iterable[Interest]) -> set[str]:
    """Folded ids, labels and keywords of the interests."""
    tokens: set[str] = set()
    for interest in interests:
        tokens.add(fold_text(interest.id))
        tokens.add(fold_text(interest.label))
        tokens.update(fold_text(keyword) for keyword in interest.keywords)
    tokens.discard("")
    return tokens


def build_selected_topic_tokens(selected_sources: Iterable[SourceConfig]) -> set[str]:
    return {fold_text(topic) for source in selected_sources for topic in source.topics}


def build_related_source_ids(selected_sources: Iterable[SourceConfig]) -> set[str]:
    return {related_id for source in selected_sources for related_id in source.related_source_ids}


def score_source(
    source: SourceConfig,
    interest_tokens: set[str],
    selected_topic_tokens: set[str],
    related_from_selection: set[str],
    selected_ids: set[str],
) -> int:
    score = 0
    source_topics = {fold_text(topic) for topic in source.topics}
    source_text = fold_text(f"{source.name} {source.description} {' '.join(source.topics)}")

    for token in interest_tokens:
        if token in source_topics:
            score += TOPIC_MATCH_SCORE
        elif len(token) >= TEXT_MATCH_MIN_LENGTH and token in source_text:
            score += TEXT_MATCH_SCORE

    if source_topics & selected_topic_tokens:
        score += SHARED_TOPIC_SCORE

    # The related graph is used in both directions
    if source.id in related_from_selection:
        score += RELATED_FROM_SELECTION_SCORE
    if any(related_id in selected_ids for related_id in source.related_source_ids):
        score += RELATED_TO_SELECTION_SCORE

    return score


def suggest_sources(
    selected_source_ids: Iterable[str],
    selected_interests: Iterable[Interest],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
    catalog: list[SourceConfig] = SOURCES,
) -> list[SourceConfig]:
    """
    Rank unselected, recommendable catalog sources for the current setup.

    With no interests and no selected sources there is nothing to score
    against; the first `limit` recommendable sources are returned in catalog
    order so new users still see something stable.
    """
    if limit <= 0:
        return []

    selected_ids = set(selected_source_ids)
    interests = list(selected_interests)
    candidates = [
        source for source in catalog
        if source.is_recommendable and source.id not in selected_ids
    ]

    if not interests and not selected_ids:
        return candidates[:limit]

    selected_sources = [source for source in catalog if source.id in selected_ids]
    interest_tokens = build_interest_tokens(interests)
    selected_topic_tokens = build_selected_topic_tokens(selected_sources)
    related_from_selection = build_related_source_ids(selected_sources)

    scored = []
    for source in candidates:
        score = score_source(
            source,
            interest_tokens,
            selected_topic_tokens,
            related_from_selection,
            selected_ids,
        )
        if score > 0:
            scored.append((score, source))

    scored.sort(key=lambda pair: (-pair[0], fold_text(pair[1].name), pair[1].name))
    return [source for _, source in scored[:limit]]


# ─────────────────────────────────────────────────────────────
# Search feeds for custom interests
# ─────────────────────────────────────────────────────────────

def _slug(value: str) -> str:
    return _NON_SLUG_RE.sub("-", fold_text(value)).strip("-") or "custom"


def build_interest_search_query(interest: Interest) -> str:
    """Up to four distinct folded terms from the label and keywords."""
    terms: list[str] = []
    for candidate in [interest.label, *interest.keywords]:
        term = fold_text(candidate)
        if not term or term in terms:
            continue
        terms.append(term)
        if len(terms) >= MAX_QUERY_TERMS:
            break
    return " ".join(terms)


def build_dynamic_topics(interest: Interest) -> tuple[str, ...]:
    topics: list[str] = []
    for candidate in [interest.id, interest.label, *interest.keywords[:MAX_QUERY_TERMS]]:
        topic = fold_text(candidate)
        if topic and topic not in topics:
            topics.append(topic)
    return tuple(topics)


def build_real_rss_recommendations(
    selected_interests: Iterable[Interest],
    limit: int = DEFAULT_DYNAMIC_LIMIT,
) -> list[SourceConfig]:
    """
    Synthesize search-feed sources for the custom interests.

    Built-in interests are skipped since catalog sources already cover them.
    """
    if limit <= 0:
        return []

    custom_interests = [
        interest for interest in selected_interests
        if interest.category is InterestCategory.CUSTOM
    ]

    recommendations: list[SourceConfig] = []
    seen_feed_urls: set[str] = set()

    for interest in custom_interests:
        query = build_interest_search_query(interest)
        if not query:
            continue
        topics = build_dynamic_topics(interest)
        interest_slug = _slug(interest.id or interest.label)

        for template in SEARCH_FEED_TEMPLATES:
            if len(recommendations) >= limit:
                return recommendations

            feed_url = template.build_feed_url(query)
            if feed_url in seen_feed_urls:
                continue

            recommendations.append(SourceConfig(
                id=f"dynamic-{interest_slug}-{template.suffix}",
                name=f"{template.name_prefix} · {interest.label}",
                website_url=template.website_url,
                feed_url=feed_url,
                description=template.description,
                topics=topics,
                related_source_ids=(),
            ))
            seen_feed_urls.add(feed_url)

    return recommendations
