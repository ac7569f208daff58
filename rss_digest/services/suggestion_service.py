"""
Suggestion service: catalog and search-feed recommendations.

Pure computation over the catalogs, so it needs no fetcher.
"""

from ..interests import sanitize_interest_selection
from ..recommendations import build_real_rss_recommendations, suggest_sources
from ..schemas import SourceResponse, SuggestionsRequest, SuggestionsResponse
from ..sources import sanitize_source_ids


class SuggestionService:
    """Recommends sources for the current interest and source selection."""

    def suggest(self, request: SuggestionsRequest) -> SuggestionsResponse:
        """Catalog suggestions plus search feeds for custom interests."""
        interests = sanitize_interest_selection(request.interests)
        source_ids = sanitize_source_ids(request.sources)

        suggested = suggest_sources(
            selected_source_ids=source_ids,
            selected_interests=interests,
            limit=request.limit,
        )
        dynamic = build_real_rss_recommendations(interests, limit=request.limit)

        return SuggestionsResponse(
            suggested=[SourceResponse.from_source(s) for s in suggested],
            dynamic=[SourceResponse.from_source(s) for s in dynamic],
        )
