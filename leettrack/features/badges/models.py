import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from leettrack.DB.base import Base


# One-time types are unique per student by check-before-insert, repeatable
# types (comeback_coder) may appear many times, so no unique constraint here.
class Badge(Base):
    __tablename__ = "badges"
    __table_args__ = (Index("ix_badges_student_type", "student_id", "badge_type"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    badge_type = Column(String(64), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    icon = Column(String(64), nullable=False)
    earned_on = Column(Date, nullable=False)
    earned_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), server_default=func.now(), nullable=False
    )

    student = relationship("Student", back_populates="badges")
