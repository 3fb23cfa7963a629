"""
Commit listing and search endpoints.
"""

import logging

from fastapi import APIRouter, Query, Response
from fastapi.responses import JSONResponse

from app.api.deps import CommitServiceDep
from app.schemas.commits import CommitOut, CommitsPageResponse, ErrorResponse
from app.services.github import CommitPage, CommitServiceError
from app.services.github.helpers import clamp_pagination

router = APIRouter(prefix="/commits", tags=["commits"])
logger = logging.getLogger(__name__)

ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    401: {"model": ErrorResponse, "description": "Token missing or rejected by GitHub"},
    500: {"model": ErrorResponse, "description": "Network or parsing failure"},
    "4XX": {"model": ErrorResponse, "description": "Upstream GitHub error (status passed through)"},
}


def error_response(e: CommitServiceError) -> JSONResponse:
    """Convert a service error into the `{error}` JSON body."""
    return JSONResponse(status_code=e.status_code, content={"error": e.message})


def page_response(result: CommitPage, response: Response) -> CommitsPageResponse:
    # Browsers must not cache; the server-side TTL cache already covers reuse
    response.headers["Cache-Control"] = "no-store"
    return CommitsPageResponse(
        commits=[CommitOut.from_record(c) for c in result.commits],
        page=result.page,
        per_page=result.per_page,
        has_next_page=result.has_next_page,
    )


@router.get("", response_model=CommitsPageResponse, responses=ERROR_RESPONSES)
async def list_commits(
    response: Response,
    service: CommitServiceDep,
    page: str | None = Query(None, description="Page number (>= 1)"),
    per_page: str | None = Query(None, description="Items per page (1-100)"),
) -> CommitsPageResponse | JSONResponse:
    """
    List one page of the repository's commit history, newest first.

    Out-of-range or non-numeric page/per_page values are clamped to the
    nearest valid value instead of being rejected.
    """
    page_num, page_size = clamp_pagination(page, per_page)
    try:
        result = await service.list_commits(page=page_num, per_page=page_size)
    except CommitServiceError as e:
        return error_response(e)
    return page_response(result, response)


@router.get("/search", response_model=CommitsPageResponse, responses=ERROR_RESPONSES)
async def search_commits(
    response: Response,
    service: CommitServiceDep,
    q: str = Query("", description="Free-text query matched against commit messages"),
    page: str | None = Query(None, description="Page number (>= 1)"),
    per_page: str | None = Query(None, description="Items per page (1-100)"),
) -> CommitsPageResponse | JSONResponse:
    """
    Search commit messages.

    An empty query returns an empty page without contacting GitHub.
    """
    page_num, page_size = clamp_pagination(page, per_page)
    try:
        result = await service.search_commits(q, page=page_num, per_page=page_size)
    except CommitServiceError as e:
        return error_response(e)
    return page_response(result, response)
