"""Exceptions for GitHub service."""

from app.services.github.constants import (
    AUTHORIZATION_ERROR_MESSAGE,
    TOKEN_NOT_CONFIGURED_MESSAGE,
)


class CommitServiceError(Exception):
    """Base error for commit retrieval, search and refresh.

    Every subclass carries the user-facing message and the HTTP status the
    API layer should answer with.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ConfigurationError(CommitServiceError):
    """GitHub token is missing from the process configuration."""

    status_code = 401

    def __init__(self, message: str = TOKEN_NOT_CONFIGURED_MESSAGE):
        super().__init__(message)


class AuthorizationError(CommitServiceError):
    """GitHub rejected the configured token."""

    status_code = 401

    def __init__(self, message: str = AUTHORIZATION_ERROR_MESSAGE):
        super().__init__(message)


class UpstreamError(CommitServiceError):
    """Any other non-success response from GitHub."""

    def __init__(
        self,
        message: str,
        status_code: int,
        reason: str = "",
        rate_limit_reset: int | None = None,
    ):
        self.reason = reason
        self.rate_limit_reset = rate_limit_reset  # Unix timestamp when rate limit resets
        super().__init__(message, status_code)


class InternalError(CommitServiceError):
    """Network failure or unreadable response body."""

    status_code = 500
