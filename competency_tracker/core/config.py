"""Application configuration from environment."""
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Competency Tracker"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./competency_tracker.db"

    # Cookie signing
    secret_key: str = "change-me-in-production-use-env"

    # Auth cookie (session-based for logged-in users)
    auth_cookie_name: str = "ct_auth"
    auth_cookie_max_age: int = 60 * 60 * 24  # 24 hours

    # Seeded into the admins table at startup; set as a JSON list in env
    builtin_admin_emails: list[str] = []

    min_password_length: int = 6
    temp_password_length: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings() -> Settings:
    return Settings()


# Package directory (holds templates/ and static/)
BASE_DIR = Path(__file__).resolve().parent.parent
