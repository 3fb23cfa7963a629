"""
Commit history view state.

Holds everything the commit page shows (commit list, pagination cursor,
search mode, error) and drives the commit service in response to user
actions: initial load, refresh, search submit and load more.

State only changes once a service call has completed. Actions that replace
the list (initial load, refresh, search submit) start a new generation; a
response that arrives after a newer generation has started is dropped, so a
slow search cannot overwrite the result of a later clear.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from app.services.github.exceptions import CommitServiceError
from app.services.github.types import CommitPage, CommitRecord, RefreshResult

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


class CommitSource(Protocol):
    """What the view needs from a commit backend.

    Satisfied by CommitService (in-process) and CommitsApiClient (over HTTP).
    Failures are raised as CommitServiceError, except refresh_commits which
    reports them in RefreshResult.error.
    """

    async def list_commits(self, page: int = 1, per_page: int = 20) -> CommitPage: ...

    async def search_commits(
        self, query: str, page: int = 1, per_page: int = 20
    ) -> CommitPage: ...

    async def refresh_commits(self) -> RefreshResult: ...


class ViewStatus(str, Enum):
    INITIAL_LOADING = "initial-loading"
    LISTING = "listing"
    SEARCHING = "searching"


@dataclass
class PaginationCursor:
    page: int = 1
    per_page: int = DEFAULT_PAGE_SIZE
    has_next_page: bool = False

    def reset(self, has_next_page: bool = False) -> None:
        self.page = 1
        self.has_next_page = has_next_page


@dataclass
class SearchState:
    query: str = ""
    active: bool = False

    def clear(self) -> None:
        self.query = ""
        self.active = False


class CommitHistoryView:
    """Session-scoped state machine behind the commit page."""

    def __init__(self, source: CommitSource, page_size: int = DEFAULT_PAGE_SIZE):
        self.source = source
        self.commits: list[CommitRecord] = []
        self.error: str | None = None
        self.cursor = PaginationCursor(per_page=page_size)
        self.search = SearchState()

        self.is_initial_loading = True
        self.is_search_submitting = False

        self._generation = 0
        # Generation of the in-flight load-more, None when idle
        self._loading_more_generation: int | None = None

    # -- derived state -------------------------------------------------------

    @property
    def status(self) -> ViewStatus:
        if self.is_initial_loading:
            return ViewStatus.INITIAL_LOADING
        return ViewStatus.SEARCHING if self.search.active else ViewStatus.LISTING

    @property
    def visible_commits(self) -> list[CommitRecord]:
        """Commits to render; an error hides the list."""
        return [] if self.error else self.commits

    @property
    def is_loading_more(self) -> bool:
        """A load-more for the current generation is in flight."""
        return self._loading_more_generation == self._generation

    @property
    def controls_disabled(self) -> bool:
        return self.is_initial_loading or self.is_search_submitting

    @property
    def can_load_more(self) -> bool:
        return self.cursor.has_next_page and not self.is_loading_more

    # -- helpers ---------------------------------------------------------------

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.debug(f"Dropping stale response (generation {generation} < {self._generation})")
            return True
        return False

    def _show_page(self, result: CommitPage) -> None:
        self.commits = list(result.commits)
        self.cursor.reset(result.has_next_page)
        self.error = None

    # -- actions ---------------------------------------------------------------

    async def load_initial(self) -> None:
        """Mount: fetch the first listing page, ending in listing mode either way."""
        generation = self._next_generation()
        self.is_initial_loading = True
        try:
            result = await self.source.list_commits(1, self.cursor.per_page)
        except CommitServiceError as e:
            if not self._is_stale(generation):
                self.error = e.message
        else:
            if not self._is_stale(generation):
                self._show_page(result)
        finally:
            self.is_initial_loading = False

    async def refresh(self) -> None:
        """
        Refresh the listing.

        On error the list is cleared and the error shown. On success the
        refreshed commits show right away, search mode is left, and page 1 is
        fetched again through the listing to settle has_next_page.
        """
        generation = self._next_generation()
        result = await self.source.refresh_commits()
        if self._is_stale(generation):
            return

        self.search.clear()
        if result.error:
            self.error = result.error
            self.commits = []
            self.cursor.reset(False)
            return

        self.commits = list(result.commits)
        self.error = None
        self.cursor.reset(len(result.commits) >= self.cursor.per_page)

        try:
            fresh = await self.source.list_commits(1, self.cursor.per_page)
        except CommitServiceError as e:
            logger.warning(f"Could not reconcile listing after refresh: {e.message}")
            return
        if self._is_stale(generation):
            return
        if self.cursor.page != 1:
            # A load-more landed meanwhile; its pages stay
            logger.debug("Skipping refresh reconcile, more pages were loaded")
            return
        self.commits = list(fresh.commits)
        self.cursor.has_next_page = fresh.has_next_page

    async def load_more(self) -> None:
        """Append the next page of the current mode. No-op while loading or at the end."""
        if self.is_loading_more or not self.cursor.has_next_page:
            return

        generation = self._generation
        next_page = self.cursor.page + 1
        self._loading_more_generation = generation
        try:
            if self.search.active and self.search.query:
                result = await self.source.search_commits(
                    self.search.query, next_page, self.cursor.per_page
                )
            else:
                result = await self.source.list_commits(next_page, self.cursor.per_page)
        except CommitServiceError as e:
            if not self._is_stale(generation):
                # Already loaded pages stay; only the error is reported
                self.error = e.message
            return
        finally:
            if self._loading_more_generation == generation:
                self._loading_more_generation = None

        if self._is_stale(generation):
            return
        self.commits = [*self.commits, *result.commits]
        self.cursor.page = next_page
        self.cursor.has_next_page = result.has_next_page
        self.error = None

    async def submit_search(self, query: str) -> None:
        """Run a search, or leave search mode and reload the listing for an empty query."""
        generation = self._next_generation()
        query = query.strip()
        self.is_search_submitting = True
        try:
            if not query:
                result = await self.source.list_commits(1, self.cursor.per_page)
            else:
                result = await self.source.search_commits(query, 1, self.cursor.per_page)
        except CommitServiceError as e:
            if not self._is_stale(generation):
                self.error = e.message
            return
        finally:
            self.is_search_submitting = False

        if self._is_stale(generation):
            return
        # Search mode changes only once its first page has arrived
        if query:
            self.search.query = query
            self.search.active = True
        else:
            self.search.clear()
        self._show_page(result)
