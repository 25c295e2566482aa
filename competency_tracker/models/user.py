"""User model: apprentices, mentors and admins share one account table."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from competency_tracker.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)  # lower-cased
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(120), nullable=False)
    last_name = Column(String(120), nullable=False)
    cohort = Column(String(120), nullable=True)
    company = Column(String(255), nullable=True)
    role = Column(String(64), nullable=False, default="Apprentice")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
