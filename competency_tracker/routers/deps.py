"""Request dependencies: current user from the auth cookie, admin gate."""
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from competency_tracker.core.config import get_settings
from competency_tracker.core.errors import AuthError, ForbiddenError
from competency_tracker.core.security import verify_session_token
from competency_tracker.db.session import get_db
from competency_tracker.models.user import User
from competency_tracker.services.directory import is_admin

settings = get_settings()


async def get_current_user_optional(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User | None:
    """Return current user if auth cookie is valid; else None."""
    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        return None
    user_id = verify_session_token(token)
    if user_id is None:
        return None
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_current_user(
    current_user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    if current_user is None:
        raise AuthError()
    return current_user


async def require_admin(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    if not await is_admin(db, current_user.email):
        raise ForbiddenError()
    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(require_admin)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
