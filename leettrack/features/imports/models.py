import uuid

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from leettrack.DB.base import Base


class WeeklyProgressData(Base):
    """Denormalised 4(+1) week grid populated by the weekly CSV import."""

    __tablename__ = "weekly_progress_data"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(
        String(36), ForeignKey("students.id", ondelete="CASCADE"), unique=True, nullable=False, index=True
    )
    week1_score = Column(Integer, nullable=False, default=0)
    week2_score = Column(Integer, nullable=False, default=0)
    week3_score = Column(Integer, nullable=False, default=0)
    week4_score = Column(Integer, nullable=False, default=0)
    current_week_score = Column(Integer, nullable=True)  # Week5 column, optional
    week2_progress = Column(Integer, nullable=False, default=0)
    week3_progress = Column(Integer, nullable=False, default=0)
    week4_progress = Column(Integer, nullable=False, default=0)
    last_week_to_current_increment = Column(Integer, nullable=False, default=0)
    total_score = Column(Integer, nullable=False, default=0)
    average_weekly_growth = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    student = relationship("Student", back_populates="weekly_progress_data")
