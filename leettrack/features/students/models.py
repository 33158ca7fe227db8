import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from leettrack.DB.base import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    handle = Column(String(255), unique=True, nullable=False, index=True)  # LeetCode username
    profile_link = Column(String(500), nullable=False)
    batch = Column(String(50), nullable=True, index=True)  # cohort tag, e.g. "2027"
    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), server_default=func.now(), nullable=False
    )

    # Explicit admin deletes cascade to every child table
    daily_progress = relationship(
        "DailyProgress", back_populates="student", cascade="all, delete-orphan"
    )
    weekly_trends = relationship(
        "WeeklyTrend", back_populates="student", cascade="all, delete-orphan"
    )
    badges = relationship("Badge", back_populates="student", cascade="all, delete-orphan")
    weekly_progress_data = relationship(
        "WeeklyProgressData",
        back_populates="student",
        uselist=False,
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Student id={self.id} handle={self.handle} batch={self.batch}>"
