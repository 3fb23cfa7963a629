"""API dependencies - re-exports from submodules."""

from .commits import CommitServiceDep, get_commit_service

__all__ = [
    "CommitServiceDep",
    "get_commit_service",
]
