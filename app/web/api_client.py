"""
HTTP client for the commit JSON API.

Lets a CommitHistoryView run against a remote instance of this application
instead of an in-process CommitService.
"""

import logging
from typing import Any

import httpx

from app.services.github.exceptions import CommitServiceError, InternalError
from app.services.github.types import CommitAccount, CommitPage, CommitRecord, RefreshResult

logger = logging.getLogger(__name__)


def parse_commit(data: dict[str, Any]) -> CommitRecord:
    """Convert one commit from the JSON API back into a CommitRecord."""
    commit = data["commit"]
    author = commit["author"]
    committer = commit.get("committer") or {}
    account = data.get("author")
    return CommitRecord(
        sha=data["sha"],
        html_url=data["html_url"],
        message=commit["message"],
        author_name=author["name"],
        author_email=author["email"],
        author_date=author["date"],
        committer_date=committer.get("date"),
        account=(
            CommitAccount(
                login=account["login"],
                avatar_url=account.get("avatar_url"),
                html_url=account.get("html_url"),
            )
            if account
            else None
        ),
    )


class CommitsApiClient:
    """Talks to `/api/commits`, `/api/commits/search` and `/refresh`."""

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            raise InternalError(str(e) or e.__class__.__name__) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            logger.warning(f"{method} {path} failed with {response.status_code}: {message}")
            raise CommitServiceError(
                message or f"HTTP error! status: {response.status_code}",
                response.status_code,
            )
        if not isinstance(data, dict):
            raise InternalError(f"Unexpected response body from {path}")
        return data

    @staticmethod
    def _parse_page(data: dict[str, Any]) -> CommitPage:
        try:
            return CommitPage(
                commits=[parse_commit(c) for c in data["commits"]],
                page=data["page"],
                per_page=data["per_page"],
                has_next_page=data["hasNextPage"],
            )
        except (KeyError, TypeError) as e:
            raise InternalError(f"Malformed commits page: {e!r}") from e

    async def list_commits(self, page: int = 1, per_page: int = 20) -> CommitPage:
        data = await self._request(
            "GET", "/api/commits", params={"page": page, "per_page": per_page}
        )
        return self._parse_page(data)

    async def search_commits(self, query: str, page: int = 1, per_page: int = 20) -> CommitPage:
        data = await self._request(
            "GET",
            "/api/commits/search",
            params={"q": query, "page": page, "per_page": per_page},
        )
        return self._parse_page(data)

    async def refresh_commits(self) -> RefreshResult:
        """Call the refresh action; transport failures are reported, not raised."""
        try:
            data = await self._request("POST", "/refresh")
            commits = [parse_commit(c) for c in data.get("commits", [])]
        except CommitServiceError as e:
            return RefreshResult(commits=[], error=e.message)
        except (KeyError, TypeError) as e:
            return RefreshResult(commits=[], error=f"Malformed refresh response: {e!r}")
        return RefreshResult(commits=commits, error=data.get("error"))
