from competency_tracker.schemas.admin import (
    AdminAddSchema,
    AdminOutSchema,
    ProgressOverviewSchema,
    UserCreateSchema,
    UserProgressSchema,
    UserSummarySchema,
    UserUpdateSchema,
)
from competency_tracker.schemas.auth import LoginSchema, RegisterSchema, SessionUserSchema
from competency_tracker.schemas.competency import (
    CatalogItemSchema,
    CompetencyOutSchema,
    ProgressOutSchema,
    SelfRatingSchema,
    ValidationCreateSchema,
    ValidationUpdateSchema,
)

__all__ = [
    "AdminAddSchema",
    "AdminOutSchema",
    "CatalogItemSchema",
    "CompetencyOutSchema",
    "LoginSchema",
    "ProgressOutSchema",
    "ProgressOverviewSchema",
    "RegisterSchema",
    "SelfRatingSchema",
    "SessionUserSchema",
    "UserCreateSchema",
    "UserProgressSchema",
    "UserSummarySchema",
    "UserUpdateSchema",
    "ValidationCreateSchema",
    "ValidationUpdateSchema",
]
