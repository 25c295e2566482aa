"""Competency model: one catalog skill with its guidance text."""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from competency_tracker.db.session import Base


class Competency(Base):
    __tablename__ = "competencies"

    id = Column(String(32), primary_key=True)  # e.g. G01, BS05
    category = Column(String(120), nullable=False, index=True)
    text = Column(Text, nullable=False)
    reference_code = Column(Text, nullable=True)
    what = Column(Text, nullable=True)
    looks_like = Column(Text, nullable=True)
    critical = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
