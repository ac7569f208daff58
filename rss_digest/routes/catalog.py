"""
Catalog routes: built-in interests, known sources and source suggestions.
"""

from fastapi import APIRouter

from ..interests import DEFAULT_INTERESTS, sanitize_catalog
from ..schemas import InterestResponse, SourceResponse, SuggestionsRequest, SuggestionsResponse
from ..services import SuggestionServiceDep
from ..sources import SOURCES

router = APIRouter(prefix="/api", tags=["catalog"])


# ─────────────────────────────────────────────────────────────
# Interests
# ─────────────────────────────────────────────────────────────

@router.get("/interests")
async def list_interests() -> list[InterestResponse]:
    """List the built-in interests, sorted by category and label."""
    return [InterestResponse.from_interest(i) for i in sanitize_catalog(DEFAULT_INTERESTS)]


# ─────────────────────────────────────────────────────────────
# Sources
# ─────────────────────────────────────────────────────────────

@router.get("/sources")
async def list_sources() -> list[SourceResponse]:
    """List the static source catalog."""
    return [SourceResponse.from_source(s) for s in SOURCES]


@router.post("/sources/suggestions")
async def suggest_sources(
    request: SuggestionsRequest,
    service: SuggestionServiceDep,
) -> SuggestionsResponse:
    """Suggest catalog sources and search feeds for the current selection."""
    return service.suggest(request)
