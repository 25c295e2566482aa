from competency_tracker.services.seeding import seed_admins, seed_competencies
from competency_tracker.services.status import derive_status

__all__ = ["derive_status", "seed_admins", "seed_competencies"]
