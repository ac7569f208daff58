"""
Pydantic models for API request/response validation.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .interests import Interest
from .pipeline import ScoredItem
from .sources import SourceConfig


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─────────────────────────────────────────────────────────────
# Requests
# ─────────────────────────────────────────────────────────────

class SummaryRequest(ApiModel):
    """Interests may be catalog ids or full descriptors (custom interests)."""
    interests: list[Any] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    source_overrides: list[Any] = Field(default_factory=list)
    email: str | None = None


class SuggestionsRequest(ApiModel):
    interests: list[Any] = Field(default_factory=list)
    sources: list[str] = Field(default_factory=list)
    limit: int = Field(default=4, ge=0, le=20)


# ─────────────────────────────────────────────────────────────
# Catalog Schemas
# ─────────────────────────────────────────────────────────────

class InterestResponse(ApiModel):
    id: str
    label: str
    keywords: list[str]
    category: str
    is_built_in: bool

    @classmethod
    def from_interest(cls, interest: Interest) -> "InterestResponse":
        return cls(
            id=interest.id,
            label=interest.label,
            keywords=list(interest.keywords),
            category=interest.category.value,
            is_built_in=interest.is_built_in,
        )


class SourceSummaryResponse(ApiModel):
    """Source as echoed in summary responses."""
    id: str
    name: str
    website_url: str
    feed_url: str

    @classmethod
    def from_source(cls, source: SourceConfig) -> "SourceSummaryResponse":
        return cls(
            id=source.id,
            name=source.name,
            website_url=source.website_url,
            feed_url=source.feed_url,
        )


class SourceResponse(SourceSummaryResponse):
    """Full catalog entry."""
    description: str
    topics: list[str]
    related_source_ids: list[str]

    @classmethod
    def from_source(cls, source: SourceConfig) -> "SourceResponse":
        return cls(
            id=source.id,
            name=source.name,
            website_url=source.website_url,
            feed_url=source.feed_url,
            description=source.description,
            topics=list(source.topics),
            related_source_ids=list(source.related_source_ids),
        )


class SuggestionsResponse(ApiModel):
    suggested: list[SourceResponse]
    dynamic: list[SourceResponse]


# ─────────────────────────────────────────────────────────────
# Summary Schemas
# ─────────────────────────────────────────────────────────────

class MatchedInterestResponse(ApiModel):
    id: str
    label: str


class SummaryItemResponse(ApiModel):
    id: str
    title: str
    link: str
    source_id: str
    source: str
    published_at: str | None
    summary: str
    matched_keywords: list[str]
    matched_interests: list[MatchedInterestResponse]
    score: int

    @classmethod
    def from_item(cls, item: ScoredItem) -> "SummaryItemResponse":
        return cls(
            id=item.id,
            title=item.title,
            link=item.link,
            source_id=item.source_id,
            source=item.source_name,
            published_at=item.published_at.isoformat() if item.published_at else None,
            summary=item.summary,
            matched_keywords=item.matched_keywords,
            matched_interests=[
                MatchedInterestResponse(id=m.id, label=m.label) for m in item.matched_interests
            ],
            score=item.score,
        )


class LimitsResponse(ApiModel):
    max_items_per_source: int
    max_total_items: int
    max_keywords_per_interest: int


class StatsResponse(ApiModel):
    total_candidates: int
    total_returned: int


class SummaryResponse(ApiModel):
    generated_at: str
    interests: list[InterestResponse]
    sources: list[SourceSummaryResponse]
    suggested_sources: list[SourceSummaryResponse]
    email: str | None
    limits: LimitsResponse
    stats: StatsResponse
    warnings: list[str]
    items: list[SummaryItemResponse]
