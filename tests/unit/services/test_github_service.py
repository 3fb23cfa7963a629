"""Unit tests for the commit service: listing, search routing and refresh.

Tests CommitService with mocked HTTP responses to verify:
- Request construction (paths, headers, params)
- Response normalization
- Search routing and fallback
- Error handling (missing token, 401, other statuses, network failures)
- Caching behavior
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from app.services.github.exceptions import (
    AuthorizationError,
    ConfigurationError,
    InternalError,
    UpstreamError,
)
from app.services.github.service import CommitService
from app.services.github.types import CommitAccount, CommitRecord
from tests.helpers.mock_factories import (
    OWNER,
    REPO,
    TOKEN,
    make_commit_json,
    make_commits_json,
    make_response,
    next_link,
)

CLIENT_PATH = "app.services.github.read_operations.get_github_client"


def _service(token: str = TOKEN, page_size: int = 20) -> CommitService:
    return CommitService(token, OWNER, REPO, branch="main", page_size=page_size)


def _search_json(items: list[dict]) -> dict:
    return {"total_count": len(items), "incomplete_results": False, "items": items}


@pytest.fixture
def client():
    """Patch the shared GitHub client with an AsyncMock."""
    with patch(CLIENT_PATH) as mock_get_client:
        mock = AsyncMock()
        mock_get_client.return_value = mock
        yield mock


def _paths(client: AsyncMock) -> list[str]:
    return [c.args[0] for c in client.get.call_args_list]


# ═══════════════════════════════════════════════════════════════════════════
# list_commits
# ═══════════════════════════════════════════════════════════════════════════


class TestListCommits:
    """Tests for fetching one page of the branch history."""

    @pytest.mark.anyio
    async def test_requests_exact_page_and_size(self, client):
        client.get.return_value = make_response(json_data=make_commits_json(["a", "b"]))

        result = await _service().list_commits(page=3, per_page=50)

        client.get.assert_called_once()
        call = client.get.call_args
        assert call.args[0] == f"/repos/{OWNER}/{REPO}/commits"
        assert call.kwargs["params"] == {"sha": "main", "per_page": 50, "page": 3}
        assert call.kwargs["headers"]["Authorization"] == f"Bearer {TOKEN}"
        assert call.kwargs["headers"]["Accept"] == "application/vnd.github+json"
        assert result.page == 3
        assert result.per_page == 50
        assert len(result.commits) == 2

    @pytest.mark.anyio
    async def test_has_next_page_from_link_header(self, client):
        client.get.return_value = make_response(
            json_data=make_commits_json(["only one"]), headers=next_link()
        )

        result = await _service().list_commits(per_page=20)

        # One item on a 20-item page, yet the Link header says there is more
        assert result.has_next_page is True

    @pytest.mark.anyio
    async def test_full_page_without_link_has_no_next(self, client):
        client.get.return_value = make_response(json_data=make_commits_json(["a", "b"]))

        result = await _service().list_commits(per_page=2)

        assert result.has_next_page is False

    @pytest.mark.anyio
    async def test_clamps_pagination(self, client):
        client.get.return_value = make_response(json_data=[])

        result = await _service().list_commits(page=0, per_page=500)

        assert client.get.call_args.kwargs["params"]["per_page"] == 100
        assert client.get.call_args.kwargs["params"]["page"] == 1
        assert (result.page, result.per_page) == (1, 100)

    @pytest.mark.anyio
    async def test_normalizes_commit(self, client):
        client.get.return_value = make_response(json_data=[make_commit_json(message="Fix\n\nBody")])

        result = await _service().list_commits()
        commit = result.commits[0]

        assert isinstance(commit, CommitRecord)
        assert commit.message == "Fix\n\nBody"
        assert commit.author_name == "Mona Lisa"
        assert commit.author_email == "mona@example.com"
        assert commit.author_date == "2026-01-15T10:00:00Z"
        assert commit.committer_date == "2026-01-15T10:05:00Z"
        assert commit.display_date == "2026-01-15T10:05:00Z"
        assert commit.account == CommitAccount(
            login="octocat",
            avatar_url="https://avatars.githubusercontent.com/octocat",
            html_url="https://github.com/octocat",
        )

    @pytest.mark.anyio
    async def test_commit_without_linked_account(self, client):
        client.get.return_value = make_response(json_data=[make_commit_json(login=None)])

        result = await _service().list_commits()

        assert result.commits[0].account is None

    @pytest.mark.anyio
    async def test_missing_token_fails_before_network(self, client):
        with pytest.raises(ConfigurationError, match="GitHub token not configured."):
            await _service(token="").list_commits()

        client.get.assert_not_called()

    @pytest.mark.anyio
    async def test_raises_authorization_error_on_401(self, client):
        client.get.return_value = make_response(status_code=401, json_data={"message": "Bad creds"})

        with pytest.raises(AuthorizationError) as exc_info:
            await _service().list_commits()

        assert exc_info.value.status_code == 401

    @pytest.mark.anyio
    async def test_raises_upstream_error_with_status(self, client):
        client.get.return_value = make_response(status_code=404, json_data={"message": "Not Found"})

        with pytest.raises(UpstreamError) as exc_info:
            await _service().list_commits()

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "GitHub API error: 404 - Not Found"

    @pytest.mark.anyio
    async def test_network_failure_becomes_internal_error(self, client):
        client.get.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(InternalError, match="connection refused") as exc_info:
            await _service().list_commits()

        assert exc_info.value.status_code == 500

    @pytest.mark.anyio
    async def test_unreadable_body_becomes_internal_error(self, client):
        client.get.return_value = httpx.Response(status_code=200, content=b"<html>")

        with pytest.raises(InternalError):
            await _service().list_commits()

    @pytest.mark.anyio
    async def test_caches_pages(self, client):
        client.get.return_value = make_response(json_data=make_commits_json(["a"]))
        svc = _service()

        first = await svc.list_commits(page=1, per_page=20)
        second = await svc.list_commits(page=1, per_page=20)

        assert first == second
        assert client.get.call_count == 1

    @pytest.mark.anyio
    async def test_cache_is_keyed_by_page(self, client):
        client.get.return_value = make_response(json_data=make_commits_json(["a"]))
        svc = _service()

        await svc.list_commits(page=1, per_page=20)
        await svc.list_commits(page=2, per_page=20)

        assert client.get.call_count == 2

    @pytest.mark.anyio
    async def test_errors_are_not_cached(self, client):
        client.get.side_effect = [
            make_response(status_code=502),
            make_response(json_data=make_commits_json(["a"])),
        ]
        svc = _service()

        with pytest.raises(UpstreamError):
            await svc.list_commits()
        result = await svc.list_commits()

        assert len(result.commits) == 1


# ═══════════════════════════════════════════════════════════════════════════
# search_commits
# ═══════════════════════════════════════════════════════════════════════════


class TestSearchCommits:
    """Tests for search routing and the listing + filter fallback."""

    @pytest.mark.anyio
    async def test_empty_query_skips_github(self, client):
        result = await _service().search_commits("   ", page=2, per_page=10)

        client.get.assert_not_called()
        assert result.commits == []
        assert result.has_next_page is False
        assert (result.page, result.per_page) == (2, 10)

    @pytest.mark.anyio
    async def test_short_query_filters_listing(self, client):
        client.get.return_value = make_response(
            json_data=make_commits_json(["Fix UI bug", "Add docs", "ui: tweak spacing"])
        )

        result = await _service().search_commits("UI", per_page=20)

        assert _paths(client) == [f"/repos/{OWNER}/{REPO}/commits"]
        assert [c.message for c in result.commits] == ["Fix UI bug", "ui: tweak spacing"]
        assert result.has_next_page is False

    @pytest.mark.anyio
    async def test_short_query_full_filtered_page_guesses_more(self, client):
        client.get.return_value = make_response(json_data=make_commits_json(["ui a", "ui b"]))

        result = await _service().search_commits("ui", per_page=2)

        assert result.has_next_page is True

    @pytest.mark.anyio
    async def test_search_request_shape(self, client):
        client.get.return_value = make_response(json_data=_search_json([make_commit_json()]))

        await _service().search_commits("refactor", page=2, per_page=30)

        call = client.get.call_args
        assert call.args[0] == "/search/commits"
        assert call.kwargs["params"] == {
            "q": f"repo:{OWNER}/{REPO} refactor",
            "per_page": 30,
            "page": 2,
            "sort": "committer-date",
            "order": "desc",
        }
        assert call.kwargs["headers"]["Accept"] == "application/vnd.github.text-match+json"

    @pytest.mark.anyio
    async def test_phrase_query_is_quoted(self, client):
        client.get.return_value = make_response(json_data=_search_json([]))

        await _service().search_commits("fix bug")

        assert client.get.call_args.kwargs["params"]["q"] == f'repo:{OWNER}/{REPO} "fix bug"'

    @pytest.mark.anyio
    async def test_query_is_trimmed(self, client):
        client.get.return_value = make_response(json_data=_search_json([]))

        await _service().search_commits("  refactor  ")

        assert client.get.call_args.kwargs["params"]["q"] == f"repo:{OWNER}/{REPO} refactor"

    @pytest.mark.anyio
    async def test_search_results_normalized_with_link_pagination(self, client):
        item = make_commit_json(login="hubot")
        item["commit"]["author"] = {"date": None}
        client.get.return_value = make_response(json_data=_search_json([item]), headers=next_link())

        result = await _service().search_commits("deploy")
        commit = result.commits[0]

        assert result.has_next_page is True
        assert commit.author_name == "hubot"
        assert commit.author_email == ""
        assert commit.author_date.endswith("Z")

    @pytest.mark.anyio
    async def test_unknown_author_without_account(self, client):
        item = make_commit_json(login=None)
        item["commit"]["author"] = {}
        client.get.return_value = make_response(json_data=_search_json([item]))

        result = await _service().search_commits("deploy")

        assert result.commits[0].author_name == "Unknown"

    @pytest.mark.parametrize("status_code", [422, 415, 403])
    @pytest.mark.anyio
    async def test_falls_back_on_rejected_search(self, client, status_code):
        client.get.side_effect = [
            make_response(status_code=status_code, json_data={"message": "nope"}),
            make_response(json_data=make_commits_json(["Refactor parser", "Add docs"])),
        ]

        result = await _service().search_commits("refactor", page=1, per_page=20)

        assert _paths(client) == ["/search/commits", f"/repos/{OWNER}/{REPO}/commits"]
        assert [c.message for c in result.commits] == ["Refactor parser"]
        assert (result.page, result.per_page, result.has_next_page) == (1, 20, False)
        fallback_params = client.get.call_args_list[1].kwargs["params"]
        assert fallback_params == {"sha": "main", "per_page": 20, "page": 1}

    @pytest.mark.anyio
    async def test_other_search_errors_surface(self, client):
        client.get.return_value = make_response(status_code=503)

        with pytest.raises(UpstreamError) as exc_info:
            await _service().search_commits("refactor")

        assert exc_info.value.status_code == 503
        assert exc_info.value.message.startswith("GitHub Search API error: 503")
        assert client.get.call_count == 1

    @pytest.mark.anyio
    async def test_search_401_is_authorization_error(self, client):
        client.get.return_value = make_response(status_code=401)

        with pytest.raises(AuthorizationError):
            await _service().search_commits("refactor")

    @pytest.mark.anyio
    async def test_missing_token_fails_before_network(self, client):
        with pytest.raises(ConfigurationError):
            await _service(token="").search_commits("refactor")

        client.get.assert_not_called()

    @pytest.mark.anyio
    async def test_search_is_not_cached(self, client):
        client.get.return_value = make_response(json_data=_search_json([]))
        svc = _service()

        await svc.search_commits("refactor")
        await svc.search_commits("refactor")

        assert client.get.call_count == 2

    @pytest.mark.anyio
    async def test_fallback_bypasses_listing_cache(self, client):
        client.get.return_value = make_response(json_data=make_commits_json(["ui change"]))
        svc = _service()

        await svc.list_commits(page=1, per_page=20)
        await svc.search_commits("ui", page=1, per_page=20)

        assert client.get.call_count == 2


# ═══════════════════════════════════════════════════════════════════════════
# refresh_commits
# ═══════════════════════════════════════════════════════════════════════════


class TestRefreshCommits:
    """Tests for the cache-bypassing refresh action."""

    @pytest.mark.anyio
    async def test_fetches_first_page_at_default_size(self, client):
        client.get.return_value = make_response(json_data=make_commits_json(["a", "b"]))

        result = await _service(page_size=20).refresh_commits()

        assert client.get.call_args.kwargs["params"] == {"sha": "main", "per_page": 20, "page": 1}
        assert len(result.commits) == 2
        assert result.error is None

    @pytest.mark.anyio
    async def test_bypasses_cache(self, client):
        client.get.return_value = make_response(json_data=make_commits_json(["a"]))
        svc = _service()

        await svc.list_commits(page=1, per_page=20)
        await svc.refresh_commits()

        assert client.get.call_count == 2

    @pytest.mark.anyio
    async def test_fresh_page_replaces_cached_listing(self, client):
        client.get.side_effect = [
            make_response(json_data=make_commits_json(["old"])),
            make_response(json_data=make_commits_json(["new", "old"])),
        ]
        svc = _service()

        await svc.list_commits(page=1, per_page=20)
        await svc.refresh_commits()
        listed = await svc.list_commits(page=1, per_page=20)

        assert [c.message for c in listed.commits] == ["new", "old"]
        assert client.get.call_count == 2

    @pytest.mark.anyio
    async def test_missing_token_reports_error(self, client):
        result = await _service(token="").refresh_commits()

        assert result.commits == []
        assert result.error == "GitHub token not configured."
        client.get.assert_not_called()

    @pytest.mark.anyio
    async def test_401_reports_authorization_error(self, client):
        client.get.return_value = make_response(status_code=401)

        result = await _service().refresh_commits()

        assert result.commits == []
        assert result.error == "GitHub authorization error."

    @pytest.mark.anyio
    async def test_other_status_reports_upstream_error(self, client):
        client.get.return_value = make_response(status_code=500)

        result = await _service().refresh_commits()

        assert result.error == "GitHub API error: 500 - Internal Server Error"

    @pytest.mark.anyio
    async def test_network_failure_reports_message(self, client):
        client.get.side_effect = httpx.ReadTimeout("timed out")

        result = await _service().refresh_commits()

        assert result.commits == []
        assert result.error == "timed out"
