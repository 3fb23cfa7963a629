"""
In-memory store of per-browser commit views.

Each browser gets a random session id cookie mapped to its own
CommitHistoryView. Sessions idle for an hour are evicted; the store is
bounded so abandoned sessions cannot grow memory without limit.
"""

import logging
import uuid
from collections.abc import Callable

from cachetools import TTLCache  # type: ignore[import-untyped]

from app.web.view import CommitHistoryView

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "commit_view_session"
SESSION_TTL_SECONDS = 3600
MAX_SESSIONS = 1000


class ViewSessionStore:
    def __init__(self, maxsize: int = MAX_SESSIONS, ttl: int = SESSION_TTL_SECONDS):
        self._views: TTLCache[str, CommitHistoryView] = TTLCache(maxsize=maxsize, ttl=ttl)

    def __len__(self) -> int:
        return len(self._views)

    def get(self, session_id: str | None) -> CommitHistoryView | None:
        if not session_id:
            return None
        view = self._views.get(session_id)
        if view is not None:
            # Re-insert to restart the idle timer
            self._views[session_id] = view
        return view

    def create(self, factory: Callable[[], CommitHistoryView]) -> tuple[str, CommitHistoryView]:
        session_id = uuid.uuid4().hex
        view = factory()
        self._views[session_id] = view
        logger.debug(f"Created view session {session_id[:8]} ({len(self._views)} active)")
        return session_id, view

    def clear(self) -> None:
        self._views.clear()


view_sessions = ViewSessionStore()


def get_view_sessions() -> ViewSessionStore:
    return view_sessions
