"""Root conftest: test infrastructure for all backend tests.

Provides:
- Autouse reset of the commit page cache and web view sessions
- A CommitService mock with the async methods specced from the real class
- API client wired to the app with the service dependency overridden
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from app.services.github import CommitService, clear_github_caches
from app.web.sessions import view_sessions
from tests.helpers.mock_factories import OWNER, REPO


@pytest.fixture(autouse=True)
def _reset_shared_state():
    """Clear process-wide caches before and after each test to prevent cross-test pollution."""
    clear_github_caches()
    view_sessions.clear()
    yield
    clear_github_caches()
    view_sessions.clear()


@pytest.fixture
def mock_commit_service() -> MagicMock:
    """CommitService stand-in; list/search/refresh become AsyncMocks from the real signatures."""
    service = MagicMock(spec=CommitService)
    service.full_name = f"{OWNER}/{REPO}"
    service.branch = "main"
    service.page_size = 20
    return service


@pytest.fixture
async def api_client(mock_commit_service: MagicMock):
    """HTTP client against the app with get_commit_service overridden.

    Tests that need a different service (e.g. a real one without a token)
    can replace the override themselves.
    """
    from app.api.deps import get_commit_service
    from app.main import app

    app.dependency_overrides[get_commit_service] = lambda: mock_commit_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
