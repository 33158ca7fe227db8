import uuid

from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from leettrack.DB.base import Base


class DailyProgress(Base):
    __tablename__ = "daily_progress"
    __table_args__ = (UniqueConstraint("student_id", "date", name="uq_daily_progress_student_date"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    total_solved = Column(Integer, nullable=False, default=0)
    easy_solved = Column(Integer, nullable=False, default=0)
    medium_solved = Column(Integer, nullable=False, default=0)
    hard_solved = Column(Integer, nullable=False, default=0)
    daily_increment = Column(Integer, nullable=False, default=0)  # signed; account resets go negative
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    student = relationship("Student", back_populates="daily_progress")


class WeeklyTrend(Base):
    __tablename__ = "weekly_trends"
    __table_args__ = (UniqueConstraint("student_id", "week_start", name="uq_weekly_trends_student_week"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    week_start = Column(Date, nullable=False)  # always a Sunday
    week_end = Column(Date, nullable=False)
    total_problems = Column(Integer, nullable=False, default=0)
    weekly_increment = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    student = relationship("Student", back_populates="weekly_trends")
