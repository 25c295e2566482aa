"""Admin directory: user and admin management, progress overview."""
import logging

from sqlalchemy import delete, literal, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from competency_tracker.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from competency_tracker.core.security import generate_temporary_password, hash_password
from competency_tracker.models.admin import Admin
from competency_tracker.models.progress import Progress
from competency_tracker.models.user import User
from competency_tracker.schemas.admin import (
    AdminOutSchema,
    ProgressOverviewSchema,
    UserCreateSchema,
    UserProgressSchema,
    UserSummarySchema,
    UserUpdateSchema,
)
from competency_tracker.services.accounts import EMAIL_RE, get_user_by_email, normalize_email
from competency_tracker.services.reports import (
    completed_count,
    count_competencies,
    in_progress_count,
    percentage,
    total_count,
)

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "Apprentice"
EDITABLE_FIELDS = ("first_name", "last_name", "company", "cohort", "role")
REQUIRED_NAME_FIELDS = ("first_name", "last_name")


def _clean(value: str | None) -> str | None:
    return value.strip() if value is not None else None


async def is_admin(db: AsyncSession, email: str) -> bool:
    return await db.get(Admin, normalize_email(email)) is not None


async def _require_user(db: AsyncSession, email: str) -> User:
    user = await get_user_by_email(db, email)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def list_users(db: AsyncSession) -> list[UserSummarySchema]:
    total_competencies = await count_competencies(db)
    result = await db.execute(
        select(User, total_count(), completed_count())
        .outerjoin(Progress, Progress.apprentice_email == User.email)
        .group_by(User.id)
        .order_by(User.last_name, User.first_name)
    )
    return [
        UserSummarySchema(
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            company=user.company,
            cohort=user.cohort,
            role=user.role,
            created_at=user.created_at,
            total_progress=total,
            completed_progress=completed,
            progress_percentage=percentage(completed, total_competencies),
        )
        for user, total, completed in result.all()
    ]


async def create_user(db: AsyncSession, body: UserCreateSchema) -> tuple[User, str]:
    """Create an account with a temporary password; the password is returned once."""
    first_name = _clean(body.first_name)
    last_name = _clean(body.last_name)
    email = normalize_email(body.email)
    if not (first_name and last_name and email):
        raise ValidationError("First name, last name, and email are required")
    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")
    if await get_user_by_email(db, email) is not None:
        raise ConflictError("User with this email already exists")

    temp_password = generate_temporary_password()
    user = User(
        email=email,
        hashed_password=hash_password(temp_password),
        first_name=first_name,
        last_name=last_name,
        company=_clean(body.company),
        cohort=_clean(body.cohort),
        role=_clean(body.role) or DEFAULT_ROLE,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Admin created user %s", email)
    return user, temp_password


async def update_user(db: AsyncSession, email: str, body: UserUpdateSchema) -> User:
    """Apply the provided fields; an email change re-keys progress and admin rows."""
    user = await _require_user(db, email)
    old_email = user.email
    changes = {field: _clean(value) for field, value in body.model_dump(include=body.model_fields_set).items()}
    for field in REQUIRED_NAME_FIELDS:
        if changes.get(field) == "":
            raise ValidationError("First name and last name cannot be empty")

    new_email = normalize_email(changes.pop("email", None)) or old_email
    if new_email != old_email:
        if not EMAIL_RE.match(new_email):
            raise ValidationError("Please enter a valid email address")
        if await get_user_by_email(db, new_email) is not None:
            raise ConflictError("User with this email already exists")

    for field in EDITABLE_FIELDS:
        if field in changes and changes[field] is not None:
            setattr(user, field, changes[field])

    try:
        if new_email != old_email:
            user.email = new_email
            await db.execute(
                update(Progress)
                .where(Progress.apprentice_email == old_email)
                .values(
                    apprentice_email=new_email,
                    id=literal(f"{new_email}_") + Progress.competency_id,
                )
                .execution_options(synchronize_session=False)
            )
            if await db.get(Admin, new_email) is None:
                await db.execute(
                    update(Admin).where(Admin.email == old_email).values(email=new_email)
                )
            else:
                await db.execute(delete(Admin).where(Admin.email == old_email))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise
    await db.refresh(user)
    logger.info("Admin updated user %s", user.email)
    return user


async def delete_user(db: AsyncSession, email: str) -> None:
    """Remove the user, their progress and any non-builtin admin membership atomically."""
    user = await _require_user(db, email)
    try:
        await db.execute(delete(Progress).where(Progress.apprentice_email == user.email))
        await db.execute(delete(Admin).where(Admin.email == user.email, Admin.builtin.is_(False)))
        await db.delete(user)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise
    logger.info("Admin deleted user %s", user.email)


async def reset_password(db: AsyncSession, email: str) -> str:
    user = await _require_user(db, email)
    new_password = generate_temporary_password()
    user.hashed_password = hash_password(new_password)
    await db.commit()
    logger.info("Admin reset password for %s", user.email)
    return new_password


async def progress_overview(db: AsyncSession) -> ProgressOverviewSchema:
    total_competencies = await count_competencies(db)
    result = await db.execute(
        select(
            User.email,
            User.first_name,
            User.last_name,
            User.company,
            total_count(),
            completed_count(),
            in_progress_count(),
        )
        .outerjoin(Progress, Progress.apprentice_email == User.email)
        .group_by(User.id)
    )

    rows = []
    for email, first_name, last_name, company, total, completed, in_progress in result.all():
        rows.append(
            UserProgressSchema(
                email=email,
                first_name=first_name,
                last_name=last_name,
                company=company,
                total_progress=total,
                completed=completed,
                in_progress=in_progress,
                not_started=max(total_competencies - total, 0),
                progress_percentage=percentage(completed, total_competencies),
            )
        )
    rows.sort(key=lambda r: (-r.progress_percentage, r.last_name))

    return ProgressOverviewSchema(
        total_users=len(rows),
        total_competencies=total_competencies,
        completed_competencies=sum(r.completed for r in rows),
        in_progress_competencies=sum(r.in_progress for r in rows),
        not_started_competencies=sum(r.not_started for r in rows),
        user_progress=rows,
    )


async def list_admins(db: AsyncSession) -> list[AdminOutSchema]:
    result = await db.execute(
        select(Admin, User.first_name, User.last_name)
        .outerjoin(User, User.email == Admin.email)
        .order_by(Admin.created_at.desc(), Admin.email)
    )
    return [
        AdminOutSchema(
            email=admin.email,
            first_name=first_name,
            last_name=last_name,
            builtin=admin.builtin,
            created_at=admin.created_at,
        )
        for admin, first_name, last_name in result.all()
    ]


async def add_admin(db: AsyncSession, email: str | None) -> Admin:
    email = normalize_email(email)
    if not email:
        raise ValidationError("Email is required")
    await _require_user(db, email)
    if await db.get(Admin, email) is not None:
        raise ConflictError("User is already an admin")

    admin = Admin(email=email, builtin=False)
    db.add(admin)
    await db.commit()
    logger.info("Granted admin to %s", email)
    return admin


async def remove_admin(db: AsyncSession, email: str) -> None:
    admin = await db.get(Admin, normalize_email(email))
    if admin is None:
        raise NotFoundError("Admin not found")
    if admin.builtin:
        raise ForbiddenError("Built-in admins cannot be removed")
    await db.delete(admin)
    await db.commit()
    logger.info("Revoked admin from %s", admin.email)
