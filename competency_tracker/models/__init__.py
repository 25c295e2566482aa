from competency_tracker.models.user import User
from competency_tracker.models.competency import Competency
from competency_tracker.models.progress import Progress
from competency_tracker.models.admin import Admin

__all__ = ["User", "Competency", "Progress", "Admin"]
