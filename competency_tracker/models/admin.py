"""Admin model: membership grants admin authority; builtin rows come from settings."""
from sqlalchemy import Boolean, Column, String, DateTime
from sqlalchemy.sql import func

from competency_tracker.db.session import Base


class Admin(Base):
    __tablename__ = "admins"

    email = Column(String(255), primary_key=True)
    builtin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
