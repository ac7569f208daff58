"""
Summary routes: ranked digest of the selected feeds.
"""

from fastapi import APIRouter

from ..schemas import SummaryRequest, SummaryResponse
from ..services import DigestServiceDep

router = APIRouter(prefix="/api", tags=["summary"])


@router.post("/summary")
async def create_summary(
    request: SummaryRequest,
    service: DigestServiceDep,
) -> SummaryResponse:
    """Fetch the selected sources and rank their items against the interests."""
    return await service.summarize(request)
