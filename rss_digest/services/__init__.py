"""
Service layer for business logic.

Services encapsulate business logic, keeping routes as thin HTTP adapters.
Each service receives its dependencies via constructor injection.

Usage in routes:
    from ..services import DigestServiceDep

    @router.post("/summary")
    async def summary(request: SummaryRequest, service: DigestServiceDep):
        return await service.summarize(request)
"""

from typing import Annotated

from fastapi import Depends

from ..config import config, get_fetcher
from ..feeds import FeedFetcher

from .digest_service import DigestService
from .suggestion_service import SuggestionService

__all__ = [
    "DigestService",
    "get_digest_service",
    "DigestServiceDep",
    "SuggestionService",
    "get_suggestion_service",
    "SuggestionServiceDep",
]


def get_digest_service(fetcher: Annotated[FeedFetcher, Depends(get_fetcher)]) -> DigestService:
    """Dependency to get DigestService instance."""
    return DigestService(fetcher=fetcher, suggestion_limit=config.SUGGESTION_LIMIT)


DigestServiceDep = Annotated[DigestService, Depends(get_digest_service)]


def get_suggestion_service() -> SuggestionService:
    """Dependency to get SuggestionService instance."""
    return SuggestionService()


SuggestionServiceDep = Annotated[SuggestionService, Depends(get_suggestion_service)]
