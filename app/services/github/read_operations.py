"""
GitHub API read operations.

Provides the read-only commit endpoints used by the viewer:
- Listing a page of commits on the configured branch (cached or fresh)
- Searching commits through the Search API
- Normalizing both payload shapes into CommitRecord
"""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from app.services.github.cache import cached_github_call, commit_page_cache, make_cache_key
from app.services.github.constants import REST_MEDIA_TYPE, SEARCH_MEDIA_TYPE
from app.services.github.exceptions import InternalError
from app.services.github.helpers import handle_error_response, has_next_page
from app.services.github.http_client import get_github_client
from app.services.github.types import CommitAccount, CommitPage, CommitRecord

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


class GitHubReadOperations:
    """
    Read-only commit operations for one repository branch.

    Uses a shared HTTP client singleton for connection pooling. The caller is
    responsible for checking that a token is configured before calling in.
    """

    def __init__(self, token: str, owner: str, repo: str, branch: str):
        self.token = token
        self.owner = owner
        self.repo = repo
        self.branch = branch

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def cache_scope(self) -> str:
        """Identity used in cache keys in place of the instance."""
        return f"{self.full_name}@{self.branch}"

    def _headers(self, accept: str = REST_MEDIA_TYPE) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": accept,
        }

    async def _get(
        self,
        path: str,
        params: dict[str, str | int],
        accept: str = REST_MEDIA_TYPE,
    ) -> httpx.Response:
        client = get_github_client()
        try:
            return await client.get(path, headers=self._headers(accept), params=params)
        except httpx.RequestError as e:
            logger.error(f"GitHub request to {path} failed: {e!r}")
            raise InternalError(str(e) or e.__class__.__name__) from e

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"GitHub returned an unreadable body ({response.status_code})")
            raise InternalError(f"Invalid JSON from GitHub: {e}") from e

    def _normalize_commit(self, data: dict[str, Any]) -> CommitRecord:
        """Convert a listing or search item to a CommitRecord."""
        commit = data.get("commit") or {}
        author = commit.get("author") or {}
        committer = commit.get("committer") or {}
        account_data = data.get("author")

        account = None
        if account_data and account_data.get("login"):
            account = CommitAccount(
                login=account_data["login"],
                avatar_url=account_data.get("avatar_url"),
                html_url=account_data.get("html_url"),
            )

        return CommitRecord(
            sha=data["sha"],
            html_url=data.get("html_url", ""),
            message=commit.get("message") or "",
            author_name=author.get("name") or (account.login if account else "Unknown"),
            author_email=author.get("email") or "",
            author_date=author.get("date") or _utc_now_iso(),
            committer_date=committer.get("date"),
            account=account,
        )

    def _normalize_all(self, items: list[Any]) -> list[CommitRecord]:
        try:
            return [self._normalize_commit(item) for item in items]
        except (KeyError, TypeError, AttributeError) as e:
            raise InternalError(f"Malformed commit in GitHub response: {e!r}") from e

    async def fetch_commit_page(self, page: int, per_page: int) -> CommitPage:
        """
        Fetch one page of commits on the branch, always from GitHub.

        Args:
            page: Page number (1-indexed)
            per_page: Items per page (1-100)

        Returns:
            CommitPage with has_next_page taken from the Link header
        """
        response = await self._get(
            f"/repos/{self.owner}/{self.repo}/commits",
            params={"sha": self.branch, "per_page": per_page, "page": page},
        )
        handle_error_response(response)

        data = self._json(response)
        if not isinstance(data, list):
            raise InternalError("Unexpected commit listing payload from GitHub")
        commits = self._normalize_all(data)
        logger.info(f"Fetched {len(commits)} commits from {self.full_name} (page {page})")

        return CommitPage(
            commits=commits,
            page=page,
            per_page=per_page,
            has_next_page=has_next_page(response),
        )

    @cached_github_call(commit_page_cache)
    async def get_commit_page(self, page: int, per_page: int) -> CommitPage:
        """
        Fetch one page of commits, served from cache when fresh.

        Results are cached for 5 minutes. Call positionally so the key matches
        the one written by refresh_commit_page.
        """
        return await self.fetch_commit_page(page, per_page)

    async def refresh_commit_page(self, page: int, per_page: int) -> CommitPage:
        """Fetch a page bypassing the cache, then store it for later cached reads."""
        result = await self.fetch_commit_page(page, per_page)
        key = make_cache_key("get_commit_page", (self, page, per_page), {})
        commit_page_cache[key] = result
        return result

    async def search_commit_page(self, expression: str, page: int, per_page: int) -> CommitPage:
        """
        Query the commit Search API, newest committer date first.

        Args:
            expression: Full search expression (already repository-scoped)
            page: Page number (1-indexed)
            per_page: Items per page (1-100)

        Raises:
            AuthorizationError: Token rejected
            UpstreamError: Any other non-2xx, including the statuses the
                caller may want to fall back on
        """
        response = await self._get(
            "/search/commits",
            params={
                "q": expression,
                "per_page": per_page,
                "page": page,
                "sort": "committer-date",
                "order": "desc",
            },
            accept=SEARCH_MEDIA_TYPE,
        )
        handle_error_response(response, api_label="GitHub Search API")

        data = self._json(response)
        items = data.get("items") if isinstance(data, dict) else None
        commits = self._normalize_all(items or [])

        return CommitPage(
            commits=commits,
            page=page,
            per_page=per_page,
            has_next_page=has_next_page(response),
        )
