"""Validation workflow: viewed -> self-rated/ready -> reviewed.

Every transition is an upsert of the single progress row keyed by
``{apprentice_email}_{competency_id}``. Transitions only ever set fields, so
the derived status reflects the furthest stage reached and never moves back.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from competency_tracker.core.errors import NotFoundError, ValidationError
from competency_tracker.models.competency import Competency
from competency_tracker.models.progress import Progress, progress_key
from competency_tracker.models.user import User
from competency_tracker.schemas.competency import ValidationCreateSchema, ValidationUpdateSchema

logger = logging.getLogger(__name__)

SELF_RATING_RANGE = range(1, 4)
MENTOR_RATING_RANGE = range(0, 6)
SIGNATURE_PREFIX = "data:image/"

INSERT_BY_DIALECT = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def check_self_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or rating not in SELF_RATING_RANGE:
        raise ValidationError("Invalid self-rating")
    return rating


def check_mentor_rating(rating) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or rating not in MENTOR_RATING_RANGE:
        raise ValidationError("Invalid rating value")
    return rating


def check_signature(signature) -> str:
    if not signature or not isinstance(signature, str):
        raise ValidationError("Signature is required")
    if not signature.startswith(SIGNATURE_PREFIX):
        raise ValidationError("Invalid signature data format")
    return signature


def check_mentor_name(name) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Mentor name is required")
    return name


async def _require_competency(db: AsyncSession, competency_id: str) -> None:
    found = await db.scalar(select(Competency.id).where(Competency.id == competency_id))
    if found is None:
        raise NotFoundError("Competency not found")


async def _get_progress(db: AsyncSession, email: str, competency_id: str) -> Progress | None:
    return await db.get(Progress, progress_key(email, competency_id))


async def _upsert_progress(db: AsyncSession, email: str, competency_id: str) -> Progress:
    """Insert the row if missing (a concurrent insert wins silently), then load it."""
    insert = INSERT_BY_DIALECT[db.get_bind().dialect.name]
    await db.execute(
        insert(Progress)
        .values(id=progress_key(email, competency_id), apprentice_email=email, competency_id=competency_id)
        .on_conflict_do_nothing(index_elements=[Progress.id])
    )
    return await _get_progress(db, email, competency_id)


async def mark_viewed(db: AsyncSession, email: str, competency_id: str) -> tuple[Progress, bool]:
    """Set viewed_date once. Returns (progress, already_viewed)."""
    await _require_competency(db, competency_id)
    progress = await _upsert_progress(db, email, competency_id)
    if progress.viewed_date:
        await db.commit()
        return progress, True

    progress.viewed_date = _now()
    await db.commit()
    await db.refresh(progress)
    return progress, False


async def submit_self_rating(db: AsyncSession, email: str, competency_id: str, rating) -> Progress:
    """Record the apprentice's self-rating and hand the competency off for review."""
    rating = check_self_rating(rating)
    await _require_competency(db, competency_id)

    now = _now()
    progress = await _upsert_progress(db, email, competency_id)
    progress.self_rating = rating
    progress.handoff_date = now
    if not progress.viewed_date:
        progress.viewed_date = now
    await db.commit()
    await db.refresh(progress)
    logger.info("Self-rating %s submitted for %s by %s", rating, competency_id, email)
    return progress


async def validate_competency(
    db: AsyncSession, competency_id: str, body: ValidationCreateSchema
) -> Progress:
    """Mentor sign-off: rating, signature and mentor name, creating the row if needed."""
    apprentice_email = (body.apprentice_email or "").strip().lower()
    if not apprentice_email:
        raise ValidationError("Apprentice email is required")
    rating = check_mentor_rating(body.rating)
    signature = check_signature(body.signature_data_url)
    mentor_name = check_mentor_name(body.mentor_name)

    await _require_competency(db, competency_id)
    apprentice = await db.scalar(select(User.id).where(User.email == apprentice_email))
    if apprentice is None:
        raise NotFoundError("Apprentice not found")

    validation_date = body.manual_validation_date or _now()
    progress = await _upsert_progress(db, apprentice_email, competency_id)
    # a review implies the earlier stages
    if not progress.viewed_date:
        progress.viewed_date = validation_date
    if not progress.handoff_date:
        progress.handoff_date = validation_date
    progress.rating = rating
    progress.date_validated = validation_date
    progress.mentor_name = mentor_name
    progress.signature = signature
    progress.comments = body.comments
    await db.commit()
    await db.refresh(progress)
    logger.info(
        "Competency %s validated for %s by %s (rating %s)",
        competency_id, apprentice_email, mentor_name, rating,
    )
    return progress


async def update_validation(
    db: AsyncSession, competency_id: str, body: ValidationUpdateSchema
) -> Progress:
    """Edit an existing review in place; the stored signature is kept."""
    apprentice_email = (body.apprentice_email or "").strip().lower()
    if not apprentice_email:
        raise ValidationError("Apprentice email is required")
    rating = check_mentor_rating(body.rating)
    mentor_name = check_mentor_name(body.mentor_name)

    progress = await _get_progress(db, apprentice_email, competency_id)
    if progress is None:
        raise NotFoundError("Cannot update a competency that has no progress record")

    progress.rating = rating
    progress.comments = body.comments
    progress.date_validated = body.manual_validation_date or progress.date_validated or _now()
    progress.mentor_name = mentor_name
    await db.commit()
    await db.refresh(progress)
    logger.info("Validation of %s for %s updated by %s", competency_id, apprentice_email, mentor_name)
    return progress


async def get_signature(db: AsyncSession, progress_id: str) -> str | None:
    progress = await db.get(Progress, progress_id)
    if progress is None:
        raise NotFoundError("Progress record not found")
    return progress.signature
