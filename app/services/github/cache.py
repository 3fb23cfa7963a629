"""
TTL caching for GitHub API responses.

Only commit listing pages are cached. They live for 5 minutes so repeated
page loads within that window are served without contacting GitHub. Search
results and the refresh action always go to GitHub directly; the refresh
action writes its fresh page back so later listing reads see it.
"""

import hashlib
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar

from cachetools import TTLCache  # type: ignore[import-untyped]

from app.services.github.constants import COMMIT_PAGE_CACHE_SIZE, COMMIT_PAGE_CACHE_TTL

logger = logging.getLogger(__name__)

# Type vars for decorator typing
P = ParamSpec("P")
T = TypeVar("T")

_commit_page_cache: TTLCache[str, Any] = TTLCache(
    maxsize=COMMIT_PAGE_CACHE_SIZE, ttl=COMMIT_PAGE_CACHE_TTL
)


def make_cache_key(func_name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    """
    Generate a cache key from function name and arguments.

    The instance (first positional arg) is replaced by its `cache_scope`
    attribute, so entries are keyed by repository identity, not by instance.
    """
    if args:
        scope = getattr(args[0], "cache_scope", "")
        cache_args = (scope, *args[1:])
    else:
        cache_args = ()
    key_data = f"{func_name}:{cache_args}:{sorted(kwargs.items())}"
    return hashlib.md5(key_data.encode()).hexdigest()


def cached_github_call(
    cache: TTLCache[str, Any],
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Decorator for caching async GitHub API calls.

    Usage:
        @cached_github_call(commit_page_cache)
        async def get_commit_page(self, page: int, per_page: int) -> CommitPage:
            ...

    On cache hit, returns immediately without making an API call.
    On cache miss, executes the function and stores the result.
    Exceptions propagate and are never stored.
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            key = make_cache_key(func.__name__, args, kwargs)

            if key in cache:
                logger.debug(f"Cache HIT: {func.__name__}")
                cached_result: T = cache[key]
                return cached_result

            logger.debug(f"Cache MISS: {func.__name__}")
            result = await func(*args, **kwargs)
            cache[key] = result
            return result

        return wrapper

    return decorator


def clear_all_caches() -> None:
    """Clear all GitHub caches. Useful for testing or when data is known to be stale."""
    _commit_page_cache.clear()
    logger.debug("Cleared all GitHub caches")


def get_cache_stats() -> dict[str, dict[str, int]]:
    """Get current cache statistics for monitoring."""
    return {
        "commit_pages": {
            "size": len(_commit_page_cache),
            "maxsize": _commit_page_cache.maxsize,
        },
    }


# Export cache instance for decorator use
commit_page_cache = _commit_page_cache
