"""
Server actions invoked from the UI.
"""

from fastapi import APIRouter

from app.api.deps import CommitServiceDep
from app.schemas.commits import CommitOut, RefreshResponse

router = APIRouter(tags=["actions"])


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_commits(service: CommitServiceDep) -> RefreshResponse:
    """
    Re-fetch the first page of commits, bypassing the cache.

    Always answers 200; a failed fetch is reported in `error` with an empty
    commit list.
    """
    result = await service.refresh_commits()
    return RefreshResponse(
        commits=[CommitOut.from_record(c) for c in result.commits],
        error=result.error,
    )
