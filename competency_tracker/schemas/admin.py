"""Pydantic schemas for the admin directory and progress overview."""
from competency_tracker.schemas.base import CamelSchema, UtcDatetime


class UserCreateSchema(CamelSchema):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    company: str | None = None
    cohort: str | None = None
    role: str | None = None


class UserUpdateSchema(UserCreateSchema):
    pass


class AdminAddSchema(CamelSchema):
    email: str | None = None


class UserSummarySchema(CamelSchema):
    email: str
    first_name: str
    last_name: str
    company: str | None = None
    cohort: str | None = None
    role: str
    created_at: UtcDatetime | None = None
    total_progress: int = 0
    completed_progress: int = 0
    progress_percentage: float = 0.0


class UserProgressSchema(CamelSchema):
    email: str
    first_name: str
    last_name: str
    company: str | None = None
    total_progress: int = 0
    completed: int = 0
    in_progress: int = 0
    not_started: int = 0
    progress_percentage: float = 0.0


class ProgressOverviewSchema(CamelSchema):
    total_users: int
    total_competencies: int
    completed_competencies: int
    in_progress_competencies: int
    not_started_competencies: int
    user_progress: list[UserProgressSchema]


class AdminOutSchema(CamelSchema):
    email: str
    first_name: str | None = None
    last_name: str | None = None
    builtin: bool = False
    created_at: UtcDatetime | None = None
