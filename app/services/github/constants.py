"""Constants for GitHub service."""

BASE_URL = "https://api.github.com"
API_VERSION = "2022-11-28"

# Media types
REST_MEDIA_TYPE = "application/vnd.github+json"
# Commit search needs the text-match preview media type in some API versions
SEARCH_MEDIA_TYPE = "application/vnd.github.text-match+json"

# Pagination bounds for the commit listing
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100

# Search endpoint ignores very short tokens, so shorter queries are filtered locally
MIN_SEARCH_QUERY_LENGTH = 3

# Search responses that switch to listing + message filter instead of failing
# 422 unprocessable query, 415 unsupported media type, 403 forbidden
SEARCH_FALLBACK_STATUSES: frozenset[int] = frozenset({403, 415, 422})

# Listing pages stay in the cache for 5 minutes
COMMIT_PAGE_CACHE_TTL = 300
COMMIT_PAGE_CACHE_SIZE = 256

# Error messages surfaced verbatim to the user
TOKEN_NOT_CONFIGURED_MESSAGE = "GitHub token not configured."
AUTHORIZATION_ERROR_MESSAGE = "GitHub authorization error."
