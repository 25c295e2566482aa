"""Competency board: catalog joined with one apprentice's progress, grouped by category."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from competency_tracker.models.competency import Competency
from competency_tracker.models.progress import Progress
from competency_tracker.schemas.competency import (
    CatalogItemSchema,
    CompetencyOutSchema,
    ProgressOutSchema,
)
from competency_tracker.services.status import derive_status

CATEGORY_ORDER = [
    "General Competencies",
    "Demonstrate Safe Work Practices",
    "Quality Control",
    "Saw Guides",
    "Knife Care",
    "Circular Saws",
    "Band Saws",
    "Mill Maintenance and Setup",
]


def ordered_categories(categories) -> list[str]:
    """Known categories in display order, then unknown ones in first-seen order."""
    present = list(dict.fromkeys(categories))
    known = [c for c in CATEGORY_ORDER if c in present]
    return known + [c for c in present if c not in CATEGORY_ORDER]


def progress_payload(progress: Progress) -> ProgressOutSchema:
    return ProgressOutSchema(
        progress_id=progress.id,
        apprentice=progress.apprentice_email,
        competency_id=progress.competency_id,
        rating=progress.rating,
        self_rating=progress.self_rating,
        mentor_name=progress.mentor_name,
        comments=progress.comments,
        date_validated=progress.date_validated,
        viewed_date=progress.viewed_date,
        handoff_date=progress.handoff_date,
        has_signature=bool(progress.signature),
    )


def _group(items: list, category_of) -> dict[str, list]:
    buckets: dict[str, list] = {}
    for item in items:
        buckets.setdefault(category_of(item), []).append(item)
    return {category: buckets[category] for category in ordered_categories(buckets)}


def group_by_category(competencies, progress_rows) -> dict[str, list[CompetencyOutSchema]]:
    """Attach status and progress to every competency and group by category."""
    by_competency = {row.competency_id: row for row in progress_rows}
    items = []
    for comp in competencies:
        progress = by_competency.get(comp.id)
        items.append(
            CompetencyOutSchema(
                id=comp.id,
                text=comp.text,
                reference_code=comp.reference_code,
                category=comp.category,
                what=comp.what,
                looks_like=comp.looks_like,
                critical=comp.critical,
                status=derive_status(progress),
                progress=progress_payload(progress) if progress is not None else None,
            )
        )
    return _group(items, lambda item: item.category)


async def _catalog(db: AsyncSession) -> list[Competency]:
    result = await db.execute(select(Competency).order_by(Competency.category, Competency.id))
    return list(result.scalars().all())


async def load_competency_board(db: AsyncSession, email: str) -> dict[str, list[CompetencyOutSchema]]:
    competencies = await _catalog(db)
    result = await db.execute(select(Progress).where(Progress.apprentice_email == email))
    return group_by_category(competencies, result.scalars().all())


async def load_catalog(db: AsyncSession) -> dict[str, list[CatalogItemSchema]]:
    """Catalog without progress, for printing blank forms."""
    competencies = await _catalog(db)
    grouped = _group(competencies, lambda comp: comp.category)
    return {
        category: [CatalogItemSchema.model_validate(comp) for comp in comps]
        for category, comps in grouped.items()
    }
