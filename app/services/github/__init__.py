"""
GitHub service package.

Re-exports all public types and classes.
Usage: `from app.services.github import CommitService, CommitPage`

Module structure:
- service.py: CommitService facade (listing, search routing, refresh)
- read_operations.py: Commit listing and search API calls
- helpers.py: Error mapping, Link header parsing, query helpers
- cache.py: TTL cache for listing pages
- types.py: Data types
- exceptions.py: Error taxonomy
- constants.py: API constants and configuration
"""

from app.services.github.cache import clear_all_caches as clear_github_caches
from app.services.github.cache import get_cache_stats as get_github_cache_stats
from app.services.github.exceptions import (
    AuthorizationError,
    CommitServiceError,
    ConfigurationError,
    InternalError,
    UpstreamError,
)
from app.services.github.helpers import RateLimitInfo, handle_error_response
from app.services.github.http_client import close_github_client
from app.services.github.read_operations import GitHubReadOperations
from app.services.github.service import CommitService
from app.services.github.types import (
    CommitAccount,
    CommitPage,
    CommitRecord,
    RefreshResult,
)

__all__ = [
    # Service (main entry point)
    "CommitService",
    "GitHubReadOperations",
    # HTTP client lifecycle
    "close_github_client",
    # Cache management
    "clear_github_caches",
    "get_github_cache_stats",
    # Utilities
    "handle_error_response",
    "RateLimitInfo",
    # Exceptions
    "CommitServiceError",
    "ConfigurationError",
    "AuthorizationError",
    "UpstreamError",
    "InternalError",
    # Types
    "CommitAccount",
    "CommitPage",
    "CommitRecord",
    "RefreshResult",
]
