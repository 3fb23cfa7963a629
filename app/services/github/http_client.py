"""
Shared HTTP client for GitHub API operations.

One pooled AsyncClient, bound to the GitHub API base URL, serves listing,
search and refresh requests. The bearer token is sent per request so that a
token rotated in the environment is picked up without rebuilding the client.
"""

import logging

import httpx

from app.services.github.constants import API_VERSION, BASE_URL

logger = logging.getLogger(__name__)

# Module-level singleton client
_client: httpx.AsyncClient | None = None


async def _log_response(response: httpx.Response) -> None:
    logger.debug(
        f"GitHub {response.request.method} {response.request.url.path} -> "
        f"{response.status_code} (rate limit remaining: "
        f"{response.headers.get('X-RateLimit-Remaining', '?')})"
    )


def get_github_client() -> httpx.AsyncClient:
    """
    Get or create the shared HTTP client for GitHub API calls.

    Returns:
        Shared httpx.AsyncClient with base URL and API version header set
    """
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            base_url=BASE_URL,
            headers={"X-GitHub-Api-Version": API_VERSION},
            timeout=httpx.Timeout(30.0, connect=5.0),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            http2=True,
            event_hooks={"response": [_log_response]},
        )
        logger.debug("Created new GitHub HTTP client")
    return _client


async def close_github_client() -> None:
    """Close the shared HTTP client. Called from the app lifespan on shutdown."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
        _client = None
        logger.debug("Closed GitHub HTTP client")
