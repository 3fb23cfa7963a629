from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # GitHub - static bearer token for the REST and Search APIs
    # Empty string = not configured; every entry point reports a configuration error
    github_token: str = ""

    # The single repository whose history is displayed
    github_owner: str = "krpzzr"
    github_repo: str = "git-commit-history-viewer"
    github_branch: str = "main"

    # Page size used by the refresh action and the web page
    commits_per_page: int = 20

    # Application
    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]

    @property
    def github_full_name(self) -> str:
        """Repository identifier in owner/repo form."""
        return f"{self.github_owner}/{self.github_repo}"

    @property
    def github_configured(self) -> bool:
        """Check if a GitHub token is present."""
        return bool(self.github_token)


settings = Settings()
