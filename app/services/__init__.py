# Services package

from app.services.github import CommitService

__all__ = [
    "CommitService",
]
