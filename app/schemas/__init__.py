"""Pydantic schemas for API request/response validation."""

from app.schemas.commits import (
    CommitAccountOut,
    CommitAuthorOut,
    CommitCommitterOut,
    CommitDetailOut,
    CommitOut,
    CommitsPageResponse,
    ErrorResponse,
    RefreshResponse,
)

__all__ = [
    "CommitAccountOut",
    "CommitAuthorOut",
    "CommitCommitterOut",
    "CommitDetailOut",
    "CommitOut",
    "CommitsPageResponse",
    "ErrorResponse",
    "RefreshResponse",
]
