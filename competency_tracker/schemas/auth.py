"""Pydantic schemas for login, registration and the session user."""
from competency_tracker.schemas.base import CamelSchema


class LoginSchema(CamelSchema):
    email: str | None = None
    password: str | None = None


class RegisterSchema(CamelSchema):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None
    cohort: str | None = None
    company: str | None = None


class SessionUserSchema(CamelSchema):
    email: str
    first_name: str
    last_name: str
    full_name: str
    cohort: str | None = None
    company: str | None = None
    role: str
    is_admin: bool = False
