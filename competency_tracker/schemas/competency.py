"""Pydantic schemas for competencies, progress and the validation workflow."""
from pydantic import StrictInt

from competency_tracker.schemas.base import CamelSchema, UtcDatetime


class ProgressOutSchema(CamelSchema):
    progress_id: str
    apprentice: str
    competency_id: str
    rating: int | None = None
    self_rating: int | None = None
    mentor_name: str | None = None
    comments: str | None = None
    date_validated: UtcDatetime | None = None
    viewed_date: UtcDatetime | None = None
    handoff_date: UtcDatetime | None = None
    has_signature: bool = False


class CatalogItemSchema(CamelSchema):
    id: str
    text: str
    reference_code: str | None = None


class CompetencyOutSchema(CatalogItemSchema):
    category: str
    what: str | None = None
    looks_like: str | None = None
    critical: str | None = None
    status: str
    progress: ProgressOutSchema | None = None


class SelfRatingSchema(CamelSchema):
    self_rating: StrictInt | None = None


class ValidationUpdateSchema(CamelSchema):
    apprentice_email: str | None = None
    rating: StrictInt | None = None
    comments: str | None = None
    manual_validation_date: UtcDatetime | None = None
    mentor_name: str | None = None


class ValidationCreateSchema(ValidationUpdateSchema):
    signature_data_url: str | None = None
