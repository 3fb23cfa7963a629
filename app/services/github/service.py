"""
Commit service for the configured repository.

Entry points used by the API routes, the refresh action and the web view:
- list_commits: one (cached) page of the branch history
- search_commits: Search API with a listing + message filter fallback
- refresh_commits: uncached first page, errors reported instead of raised
"""

import logging

from app.config import Settings
from app.services.github.constants import (
    MIN_SEARCH_QUERY_LENGTH,
    SEARCH_FALLBACK_STATUSES,
)
from app.services.github.exceptions import (
    CommitServiceError,
    ConfigurationError,
    UpstreamError,
)
from app.services.github.helpers import (
    build_search_expression,
    clamp_pagination,
    filter_commits_by_message,
)
from app.services.github.read_operations import GitHubReadOperations
from app.services.github.types import CommitPage, RefreshResult

logger = logging.getLogger(__name__)


class CommitService:
    """Service for reading the commit history of one GitHub repository."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        branch: str = "main",
        page_size: int = 20,
    ):
        self.token = token
        _, self.page_size = clamp_pagination(1, page_size)
        self._reader = GitHubReadOperations(token, owner, repo, branch)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CommitService":
        return cls(
            token=settings.github_token,
            owner=settings.github_owner,
            repo=settings.github_repo,
            branch=settings.github_branch,
            page_size=settings.commits_per_page,
        )

    @property
    def full_name(self) -> str:
        return self._reader.full_name

    @property
    def branch(self) -> str:
        return self._reader.branch

    def _require_token(self) -> None:
        if not self.token:
            logger.error("GITHUB_TOKEN is not set; refusing to call GitHub")
            raise ConfigurationError()

    async def list_commits(self, page: int = 1, per_page: int = 20) -> CommitPage:
        """
        Fetch one page of the branch history.

        Args:
            page: Page number, clamped to >= 1
            per_page: Page size, clamped into [1, 100]

        Returns:
            CommitPage with has_next_page from the Link header

        Raises:
            ConfigurationError: No token configured (nothing is sent to GitHub)
            AuthorizationError: GitHub rejected the token
            UpstreamError: Any other non-2xx response
            InternalError: Network failure or unreadable body
        """
        self._require_token()
        page, per_page = clamp_pagination(page, per_page)
        logger.info(f"Fetching commits from {self.full_name} (page {page}, per_page {per_page})")
        return await self._reader.get_commit_page(page, per_page)

    async def search_commits(self, query: str, page: int = 1, per_page: int = 20) -> CommitPage:
        """
        Search commit messages.

        Routing:
        1. Empty query: empty result, GitHub is not contacted.
        2. Fewer than 3 characters: filter one listing page locally.
        3. Otherwise: Search API; on 422/415/403 filter one listing page locally.

        Never cached. Raises the same errors as list_commits.
        """
        self._require_token()
        page, per_page = clamp_pagination(page, per_page)
        query = query.strip()

        if not query:
            return CommitPage(commits=[], page=page, per_page=per_page, has_next_page=False)

        if len(query) < MIN_SEARCH_QUERY_LENGTH:
            logger.info(f"Short query {query!r}, filtering recent commits instead of searching")
            return await self._filter_recent_commits(query, page, per_page)

        expression = build_search_expression(self.full_name, query)
        try:
            return await self._reader.search_commit_page(expression, page, per_page)
        except UpstreamError as e:
            if e.status_code not in SEARCH_FALLBACK_STATUSES:
                raise
            logger.warning(
                f"Search API rejected {expression!r} ({e.status_code}), "
                "falling back to filtering recent commits"
            )
            return await self._filter_recent_commits(query, page, per_page)

    async def _filter_recent_commits(self, query: str, page: int, per_page: int) -> CommitPage:
        """
        Fetch one listing page fresh and keep commits whose message matches.

        has_next_page is a best-effort guess: a full filtered page suggests
        there may be more.
        """
        recent = await self._reader.fetch_commit_page(page, per_page)
        filtered = filter_commits_by_message(recent.commits, query)
        return CommitPage(
            commits=filtered,
            page=page,
            per_page=per_page,
            has_next_page=len(filtered) == per_page,
        )

    async def refresh_commits(self) -> RefreshResult:
        """
        Re-fetch the first page at the default page size, bypassing the cache.

        Failures come back as RefreshResult.error rather than exceptions so the
        caller can tell "no commits" from "fetch failed".
        """
        try:
            self._require_token()
            logger.info(f"Refreshing commits from {self.full_name}")
            result = await self._reader.refresh_commit_page(1, self.page_size)
        except CommitServiceError as e:
            logger.warning(f"Refresh failed: {e.message}")
            return RefreshResult(commits=[], error=e.message)

        logger.info(f"Successfully refreshed {len(result.commits)} commits")
        return RefreshResult(commits=result.commits)
