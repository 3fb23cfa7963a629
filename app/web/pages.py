"""
Server-rendered commit history page.

GET / renders the current session's view. The page's buttons post to the
/view/* endpoints, which run one view action and redirect back (303), so a
browser reload never repeats an action.
"""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.api.deps import CommitServiceDep
from app.services.github import CommitService
from app.web.formatting import author_display_name, first_line, relative_time, short_sha
from app.web.sessions import SESSION_COOKIE_NAME, ViewSessionStore, get_view_sessions
from app.web.theme import THEME_STORAGE_KEY, ThemePreference
from app.web.view import CommitHistoryView

router = APIRouter(tags=["pages"])
logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
THEME_COOKIE_MAX_AGE = 365 * 24 * 3600

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["first_line"] = first_line
templates.env.filters["short_sha"] = short_sha
templates.env.filters["relative_time"] = relative_time
templates.env.globals["author_display_name"] = author_display_name

ViewSessionsDep = Annotated[ViewSessionStore, Depends(get_view_sessions)]


async def get_session_view(
    request: Request,
    service: CommitService,
    sessions: ViewSessionStore,
) -> tuple[str, CommitHistoryView]:
    """Find the caller's view, or create and initially load a new one."""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    view = sessions.get(session_id)
    if session_id and view is not None:
        view.source = service
        return session_id, view

    session_id, view = sessions.create(
        lambda: CommitHistoryView(service, page_size=service.page_size)
    )
    await view.load_initial()
    return session_id, view


def _redirect_home(session_id: str) -> RedirectResponse:
    response = RedirectResponse("/", status_code=303)
    response.set_cookie(SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")
    return response


@router.get("/", response_class=HTMLResponse)
async def commit_history_page(
    request: Request,
    service: CommitServiceDep,
    sessions: ViewSessionsDep,
) -> HTMLResponse:
    """Render the commit list for this browser session."""
    session_id, view = await get_session_view(request, service, sessions)
    theme = ThemePreference(dict(request.cookies)).theme

    response = templates.TemplateResponse(
        request,
        "commits.html",
        {
            "view": view,
            "theme": theme.value,
            "repository": service.full_name,
            "branch": service.branch,
        },
    )
    response.set_cookie(SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")
    return response


@router.post("/view/search")
async def submit_search(
    request: Request,
    service: CommitServiceDep,
    sessions: ViewSessionsDep,
    q: Annotated[str, Form()] = "",
) -> RedirectResponse:
    session_id, view = await get_session_view(request, service, sessions)
    await view.submit_search(q)
    return _redirect_home(session_id)


@router.post("/view/refresh")
async def refresh_view(
    request: Request,
    service: CommitServiceDep,
    sessions: ViewSessionsDep,
) -> RedirectResponse:
    session_id, view = await get_session_view(request, service, sessions)
    await view.refresh()
    return _redirect_home(session_id)


@router.post("/view/more")
async def load_more(
    request: Request,
    service: CommitServiceDep,
    sessions: ViewSessionsDep,
) -> RedirectResponse:
    session_id, view = await get_session_view(request, service, sessions)
    await view.load_more()
    return _redirect_home(session_id)


@router.post("/view/theme")
async def toggle_theme(request: Request) -> RedirectResponse:
    """Flip light/dark and persist the choice in a cookie."""
    storage = dict(request.cookies)
    new_theme = ThemePreference(storage).toggle()

    response = RedirectResponse("/", status_code=303)
    response.set_cookie(
        THEME_STORAGE_KEY,
        storage[THEME_STORAGE_KEY],
        max_age=THEME_COOKIE_MAX_AGE,
        samesite="lax",
    )
    logger.debug(f"Theme switched to {new_theme.value}")
    return response
