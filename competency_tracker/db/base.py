"""SQLAlchemy declarative base and model imports for Alembic."""
from competency_tracker.db.session import Base

# Import all models so Alembic can see them
from competency_tracker.models.admin import Admin  # noqa: F401
from competency_tracker.models.competency import Competency  # noqa: F401
from competency_tracker.models.progress import Progress  # noqa: F401
from competency_tracker.models.user import User  # noqa: F401

__all__ = ["Base", "User", "Competency", "Progress", "Admin"]
