"""Commit service dependency.

Builds a CommitService from the current settings on every request, so the
token check runs per request and tests can swap the service through
`app.dependency_overrides[get_commit_service]`.
"""

from typing import Annotated

from fastapi import Depends

from app.config import settings
from app.services.github import CommitService


def get_commit_service() -> CommitService:
    """Build the service for the configured repository."""
    return CommitService.from_settings(settings)


CommitServiceDep = Annotated[CommitService, Depends(get_commit_service)]
