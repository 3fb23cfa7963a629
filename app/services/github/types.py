"""Data types for GitHub API responses."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CommitAccount:
    """GitHub account linked to a commit author."""

    login: str
    avatar_url: str | None
    html_url: str | None


@dataclass(frozen=True)
class CommitRecord:
    """Normalized commit, as returned by both the listing and search endpoints."""

    sha: str
    html_url: str
    message: str
    author_name: str
    author_email: str
    author_date: str  # ISO 8601
    committer_date: str | None = None  # ISO 8601, preferred for display
    account: CommitAccount | None = None

    @property
    def display_date(self) -> str:
        return self.committer_date or self.author_date


@dataclass
class CommitPage:
    """One page of commits plus pagination info."""

    commits: list[CommitRecord]
    page: int
    per_page: int
    has_next_page: bool


@dataclass
class RefreshResult:
    """Outcome of the refresh action. `error` is set instead of raising."""

    commits: list[CommitRecord] = field(default_factory=list)
    error: str | None = None
