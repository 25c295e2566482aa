"""Registration and login."""
import logging
import re

from pydantic.alias_generators import to_camel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from competency_tracker.core.config import get_settings
from competency_tracker.core.errors import AuthError, ConflictError, ValidationError
from competency_tracker.core.security import hash_password, verify_password
from competency_tracker.models.user import User
from competency_tracker.schemas.auth import RegisterSchema, SessionUserSchema

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

REGISTER_FIELDS = ("first_name", "last_name", "email", "password", "cohort", "company")


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def check_password(password: str) -> str:
    min_length = get_settings().min_password_length
    if len(password) < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters")
    # bcrypt hard limit: 72 bytes (UTF-8)
    if len(password.encode("utf-8")) > 72:
        raise ValidationError("Password is too long")
    return password


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, body: RegisterSchema) -> User:
    for field in REGISTER_FIELDS:
        value = getattr(body, field)
        if not value or not value.strip():
            raise ValidationError(f"Missing required field: {to_camel(field)}")

    check_password(body.password)
    email = normalize_email(body.email)
    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")
    if await get_user_by_email(db, email) is not None:
        raise ConflictError("This email address is already registered")

    user = User(
        email=email,
        hashed_password=hash_password(body.password),
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        cohort=body.cohort.strip(),
        company=body.company.strip(),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Registered %s (cohort %s, company %s)", user.email, user.cohort, user.company)
    return user


async def authenticate(db: AsyncSession, email: str | None, password: str | None) -> User:
    if not email or not password:
        raise ValidationError("Email and password are required")
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.warning("Failed login for %s", normalize_email(email))
        raise AuthError("Invalid email or password")
    return user


def session_user(user: User, is_admin: bool = False) -> SessionUserSchema:
    return SessionUserSchema(
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
        cohort=user.cohort,
        company=user.company,
        role=user.role,
        is_admin=is_admin,
    )
