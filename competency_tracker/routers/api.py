"""API routes: competency board, workflow transitions, signatures."""
from fastapi import APIRouter

from competency_tracker.routers.deps import CurrentUser, DbSession
from competency_tracker.schemas.base import as_utc
from competency_tracker.schemas.competency import (
    SelfRatingSchema,
    ValidationCreateSchema,
    ValidationUpdateSchema,
)
from competency_tracker.services import workflow
from competency_tracker.services.competencies import load_catalog, load_competency_board

router = APIRouter(prefix="/api", tags=["api"])


@router.get("/competencies")
async def get_competencies(current_user: CurrentUser, db: DbSession):
    """All competencies grouped by category, with the caller's status and progress."""
    board = await load_competency_board(db, current_user.email)
    return {"success": True, "competencies": board}


@router.get("/competencies/list")
async def get_competency_list(current_user: CurrentUser, db: DbSession):
    """Catalog only, for blank forms."""
    return {"success": True, "competencies": await load_catalog(db)}


@router.post("/competencies/{competency_id}/viewed")
async def mark_viewed(competency_id: str, current_user: CurrentUser, db: DbSession):
    progress, already = await workflow.mark_viewed(db, current_user.email, competency_id)
    message = "Already marked as viewed" if already else "Marked as viewed"
    return {"success": True, "message": message, "viewedDate": as_utc(progress.viewed_date)}


@router.post("/competencies/{competency_id}/ready")
async def mark_ready(
    competency_id: str,
    body: SelfRatingSchema,
    current_user: CurrentUser,
    db: DbSession,
):
    progress = await workflow.submit_self_rating(db, current_user.email, competency_id, body.self_rating)
    return {
        "success": True,
        "message": "Self-rating saved and marked ready for mentor",
        "handoffDate": as_utc(progress.handoff_date),
    }


@router.post("/competencies/{competency_id}/validate")
async def validate_competency(
    competency_id: str,
    body: ValidationCreateSchema,
    current_user: CurrentUser,
    db: DbSession,
):
    """Mentor review with signature."""
    progress = await workflow.validate_competency(db, competency_id, body)
    return {
        "success": True,
        "message": "Competency validation saved successfully",
        "dateValidated": as_utc(progress.date_validated),
    }


@router.put("/competencies/{competency_id}/validate")
async def update_validation(
    competency_id: str,
    body: ValidationUpdateSchema,
    current_user: CurrentUser,
    db: DbSession,
):
    """Edit an existing review; no signature required."""
    progress = await workflow.update_validation(db, competency_id, body)
    return {
        "success": True,
        "message": "Validation updated successfully",
        "dateValidated": as_utc(progress.date_validated),
    }


@router.get("/progress/{progress_id}/signature")
async def get_signature(progress_id: str, current_user: CurrentUser, db: DbSession):
    return {"success": True, "signature": await workflow.get_signature(db, progress_id)}
