"""
GitHub API helper utilities.

Provides rate limit handling, error response processing, pagination parsing
and the query helpers shared by the listing and search paths.
"""

import logging
import re

import httpx

from app.services.github.constants import (
    DEFAULT_PAGE,
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
)
from app.services.github.exceptions import AuthorizationError, UpstreamError
from app.services.github.types import CommitRecord

logger = logging.getLogger(__name__)

_NEXT_LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="next"')
_WHITESPACE_PATTERN = re.compile(r"\s")


class RateLimitInfo:
    """Rate limit information from GitHub API response."""

    def __init__(self, response: httpx.Response) -> None:
        self.remaining = response.headers.get("X-RateLimit-Remaining")
        self.reset = response.headers.get("X-RateLimit-Reset")

    @property
    def reset_timestamp(self) -> int | None:
        """Get reset timestamp as integer, or None if not available."""
        return int(self.reset) if self.reset else None

    @property
    def is_exhausted(self) -> bool:
        """Check if rate limit is exhausted."""
        return self.remaining is not None and int(self.remaining) == 0


def has_next_page(response: httpx.Response) -> bool:
    """Check the Link header for a rel="next" relation."""
    link_header = response.headers.get("Link", "")
    return _NEXT_LINK_PATTERN.search(link_header) is not None


def handle_error_response(response: httpx.Response, api_label: str = "GitHub API") -> None:
    """
    Handle error responses from GitHub API.

    Args:
        response: The HTTP response from GitHub API
        api_label: Prefix for the error message ("GitHub API", "GitHub Search API")

    Raises:
        AuthorizationError: If GitHub rejected the token (401)
        UpstreamError: For any other non-2xx status
    """
    if response.is_success:
        return

    logger.warning(
        f"{api_label} error response {response.status_code}: {response.text[:500]!r}"
    )

    if response.status_code == 401:
        raise AuthorizationError()

    rate_info = RateLimitInfo(response)
    if response.status_code == 403 and rate_info.is_exhausted:
        logger.warning(f"{api_label} rate limit exhausted, resets at {rate_info.reset}")

    reason = response.reason_phrase
    raise UpstreamError(
        f"{api_label} error: {response.status_code} - {reason}",
        response.status_code,
        reason=reason,
        rate_limit_reset=rate_info.reset_timestamp if rate_info.is_exhausted else None,
    )


def parse_int(value: str | int | None, default: int) -> int:
    """Parse a query-string integer, falling back to the default on junk input."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def clamp_pagination(
    page: str | int | None = None,
    per_page: str | int | None = None,
) -> tuple[int, int]:
    """Clamp page to >= 1 and per_page into [1, 100]."""
    clamped_page = max(1, parse_int(page, DEFAULT_PAGE))
    clamped_per_page = min(MAX_PER_PAGE, max(1, parse_int(per_page, DEFAULT_PER_PAGE)))
    return clamped_page, clamped_per_page


def build_search_expression(full_name: str, query: str) -> str:
    """
    Build a repository-scoped commit search expression.

    Queries containing whitespace become a quoted phrase; double quotes inside
    the query are dropped so the phrase stays well formed.

    Example:
        build_search_expression("octo/repo", "fix bug") -> 'repo:octo/repo "fix bug"'
    """
    if _WHITESPACE_PATTERN.search(query):
        term = '"' + query.replace('"', "") + '"'
    else:
        term = query
    return f"repo:{full_name} {term}"


def filter_commits_by_message(commits: list[CommitRecord], query: str) -> list[CommitRecord]:
    """Keep commits whose message contains the query, case-insensitively, in order."""
    lowered = query.lower()
    return [c for c in commits if lowered in c.message.lower()]
