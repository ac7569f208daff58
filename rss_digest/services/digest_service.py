"""
Digest service: business logic behind the summary endpoint.

Resolves the untrusted request into interests and sources, runs the
pipeline and the recommendation engine, and shapes the response.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from ..exceptions import require_non_empty
from ..interests import MAX_KEYWORDS_PER_INTEREST, sanitize_interest_selection
from ..pipeline import MAX_ITEMS_PER_SOURCE, MAX_TOTAL_ITEMS, build_summary
from ..recommendations import suggest_sources
from ..schemas import (
    InterestResponse,
    LimitsResponse,
    SourceSummaryResponse,
    StatsResponse,
    SummaryItemResponse,
    SummaryRequest,
    SummaryResponse,
)
from ..sources import (
    get_sources_by_ids,
    merge_configs,
    sanitize_source_ids,
    sanitize_source_overrides,
)

if TYPE_CHECKING:
    from ..feeds import FeedFetcher

logger = logging.getLogger(__name__)


def sanitize_email(email: str | None) -> str | None:
    """The address is echoed back only; nothing is sent to it."""
    if not email:
        return None
    trimmed = email.strip()
    return trimmed or None


class DigestService:
    """Builds the digest for a summary request."""

    def __init__(self, fetcher: "FeedFetcher", suggestion_limit: int = 4):
        self.fetcher = fetcher
        self.suggestion_limit = suggestion_limit

    async def summarize(self, request: SummaryRequest) -> SummaryResponse:
        """
        Build the digest for a summary request.

        Raises:
            HTTPException: 400 if no valid interest or source is left
        """
        interests = require_non_empty(
            sanitize_interest_selection(request.interests),
            "Select at least one valid interest with keywords.",
        )

        source_ids = sanitize_source_ids(request.sources)
        overrides = sanitize_source_overrides(request.source_overrides)
        sources = require_non_empty(
            merge_configs(get_sources_by_ids(source_ids), overrides),
            "Select at least one feed source.",
        )

        suggestions = suggest_sources(
            selected_source_ids=source_ids,
            selected_interests=interests,
            limit=self.suggestion_limit,
        )

        logger.info(f"Building summary for {len(interests)} interests over {len(sources)} sources")
        result = await build_summary(interests, sources, self.fetcher)

        return SummaryResponse(
            generated_at=datetime.now(timezone.utc).isoformat(),
            interests=[InterestResponse.from_interest(i) for i in interests],
            sources=[SourceSummaryResponse.from_source(s) for s in sources],
            suggested_sources=[SourceSummaryResponse.from_source(s) for s in suggestions],
            email=sanitize_email(request.email),
            limits=LimitsResponse(
                max_items_per_source=MAX_ITEMS_PER_SOURCE,
                max_total_items=MAX_TOTAL_ITEMS,
                max_keywords_per_interest=MAX_KEYWORDS_PER_INTEREST,
            ),
            stats=StatsResponse(
                total_candidates=result.total_candidates,
                total_returned=len(result.items),
            ),
            warnings=result.warnings,
            items=[SummaryItemResponse.from_item(item) for item in result.items],
        )
