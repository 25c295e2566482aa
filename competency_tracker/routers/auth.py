"""Auth API: login, register, logout, current user. Session-based auth via signed cookie."""
from fastapi import APIRouter, Response

from competency_tracker.core.config import get_settings
from competency_tracker.core.security import create_session_token
from competency_tracker.models.user import User
from competency_tracker.routers.deps import CurrentUser, DbSession
from competency_tracker.schemas.auth import LoginSchema, RegisterSchema
from competency_tracker.services.accounts import authenticate, register_user, session_user
from competency_tracker.services.directory import is_admin

router = APIRouter(prefix="/api", tags=["auth"])
settings = get_settings()


def set_auth_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=create_session_token(user.id),
        max_age=settings.auth_cookie_max_age,
        httponly=True,
        samesite="lax",
        path="/",
    )


def clear_auth_cookie(response: Response) -> None:
    # path must match the one used in set_cookie()
    response.delete_cookie(settings.auth_cookie_name, path="/")


@router.post("/login")
async def login(body: LoginSchema, response: Response, db: DbSession):
    """Verify credentials and set the auth cookie."""
    user = await authenticate(db, body.email, body.password)
    set_auth_cookie(response, user)
    return {"success": True, "user": session_user(user, await is_admin(db, user.email))}


@router.post("/register")
async def register(body: RegisterSchema, db: DbSession):
    await register_user(db, body)
    return {"success": True, "message": "Registration successful! You can now log in."}


@router.post("/logout")
async def logout(response: Response):
    clear_auth_cookie(response)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/user")
async def current_user_info(current_user: CurrentUser, db: DbSession):
    return session_user(current_user, await is_admin(db, current_user.email))
