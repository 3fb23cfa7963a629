"""Response schemas for the commit endpoints.

The commit shape mirrors GitHub's own payload (`commit.author`, top-level
`author` account) so the JSON API reads like the upstream it relays.
"""

from pydantic import BaseModel, Field

from app.services.github.types import CommitRecord


class CommitAuthorOut(BaseModel):
    name: str
    email: str
    date: str


class CommitCommitterOut(BaseModel):
    date: str


class CommitDetailOut(BaseModel):
    message: str
    author: CommitAuthorOut
    committer: CommitCommitterOut | None = None


class CommitAccountOut(BaseModel):
    login: str
    avatar_url: str | None
    html_url: str | None


class CommitOut(BaseModel):
    """One commit as returned by the JSON API."""

    sha: str
    html_url: str
    commit: CommitDetailOut
    author: CommitAccountOut | None

    @classmethod
    def from_record(cls, record: CommitRecord) -> "CommitOut":
        account = record.account
        return cls(
            sha=record.sha,
            html_url=record.html_url,
            commit=CommitDetailOut(
                message=record.message,
                author=CommitAuthorOut(
                    name=record.author_name,
                    email=record.author_email,
                    date=record.author_date,
                ),
                committer=(
                    CommitCommitterOut(date=record.committer_date)
                    if record.committer_date
                    else None
                ),
            ),
            author=(
                CommitAccountOut(
                    login=account.login,
                    avatar_url=account.avatar_url,
                    html_url=account.html_url,
                )
                if account
                else None
            ),
        )


class CommitsPageResponse(BaseModel):
    """Response for listing and searching commits."""

    commits: list[CommitOut]
    page: int
    per_page: int
    has_next_page: bool = Field(serialization_alias="hasNextPage")


class RefreshResponse(BaseModel):
    """Response from the refresh action. `error` is set when the fetch failed."""

    commits: list[CommitOut]
    error: str | None = None


class ErrorResponse(BaseModel):
    error: str
