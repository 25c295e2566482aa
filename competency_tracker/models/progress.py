"""Progress model: one apprentice's advancement on one competency."""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from competency_tracker.db.session import Base


def progress_key(apprentice_email: str, competency_id: str) -> str:
    return f"{apprentice_email}_{competency_id}"


class Progress(Base):
    __tablename__ = "progress"

    # "{apprentice_email}_{competency_id}"; one row per user/competency pair
    id = Column(String(320), primary_key=True)
    apprentice_email = Column(String(255), nullable=False, index=True)
    competency_id = Column(String(32), nullable=False, index=True)

    self_rating = Column(Integer, nullable=True)  # 1-3, apprentice
    rating = Column(Integer, nullable=True)  # 0-5, mentor
    viewed_date = Column(DateTime(timezone=True), nullable=True)
    handoff_date = Column(DateTime(timezone=True), nullable=True)
    date_validated = Column(DateTime(timezone=True), nullable=True)
    mentor_name = Column(String(255), nullable=True)
    signature = Column(Text, nullable=True)  # data:image/... URL
    comments = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=True
    )
