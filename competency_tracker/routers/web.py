"""Web routes: login form and the server-rendered competency dashboard. Jinja2 templates."""
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from competency_tracker.core.config import BASE_DIR
from competency_tracker.core.errors import AuthError, ValidationError
from competency_tracker.models.user import User
from competency_tracker.routers.auth import clear_auth_cookie, set_auth_cookie
from competency_tracker.routers.deps import DbSession, get_current_user_optional
from competency_tracker.services.accounts import authenticate
from competency_tracker.services.competencies import load_competency_board
from competency_tracker.services.directory import is_admin
from competency_tracker.services.status import STATUS_DISPLAY, STATUS_ORDER

router = APIRouter()
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def _redirect(url, **params) -> RedirectResponse:
    """303 redirect with query params."""
    return RedirectResponse(url.include_query_params(**params), status_code=303)


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    db: DbSession,
    current_user: Annotated[User | None, Depends(get_current_user_optional)],
):
    if current_user is None:
        return RedirectResponse(request.url_for("login_get"), status_code=303)

    board = await load_competency_board(db, current_user.email)
    counts = {status: 0 for status in STATUS_ORDER}
    for items in board.values():
        for item in items:
            counts[item.status] += 1

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "current_user": current_user,
            "is_admin": await is_admin(db, current_user.email),
            "board": board,
            "counts": counts,
            "status_display": STATUS_DISPLAY,
        },
    )


@router.get("/login", response_class=HTMLResponse)
async def login_get(
    request: Request,
    current_user: Annotated[User | None, Depends(get_current_user_optional)],
    error: str | None = None,
):
    """Show login form."""
    return templates.TemplateResponse(
        request,
        "login.html",
        {"current_user": current_user, "error": error},
    )


@router.post("/login", response_class=RedirectResponse)
async def login_post(
    request: Request,
    db: DbSession,
    email: Annotated[str, Form()],
    password: Annotated[str, Form()],
):
    """Authenticate and set auth cookie; redirect to the dashboard."""
    try:
        user = await authenticate(db, email, password)
    except (AuthError, ValidationError):
        return _redirect(request.url_for("login_get"), error="invalid")

    response = RedirectResponse(request.url_for("home"), status_code=303)
    set_auth_cookie(response, user)
    return response


@router.post("/logout", response_class=RedirectResponse)
async def logout_post(request: Request):
    """Clear auth cookie and redirect to login."""
    response = RedirectResponse(request.url_for("login_get"), status_code=303)
    clear_auth_cookie(response)
    return response
