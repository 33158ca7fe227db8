from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from leettrack.features.students.models import Student
from leettrack.features.students.repository import default_session_factory
from .models import WeeklyProgressData


class WeeklyProgressRepository:
    def __init__(self, session_factory: Callable[[], Session] = default_session_factory):
        self._session = session_factory

    def get_for_student(self, student_id: str) -> Optional[WeeklyProgressData]:
        with self._session() as db:
            return db.query(WeeklyProgressData).filter(WeeklyProgressData.student_id == student_id).first()

    def upsert(self, student_id: str, fields: Dict[str, Any]) -> Tuple[WeeklyProgressData, bool]:
        """Overwrite the student's row or insert it. Returns (row, created)."""
        with self._session() as db:
            row = db.query(WeeklyProgressData).filter(WeeklyProgressData.student_id == student_id).first()
            created = row is None
            if created:
                row = WeeklyProgressData(student_id=student_id, **fields)
                db.add(row)
            else:
                for key, value in fields.items():
                    setattr(row, key, value)
            db.commit()
            db.refresh(row)
            return row, created

    def list_with_students(self) -> List[Tuple[WeeklyProgressData, Student]]:
        """Rows in student onboarding order."""
        with self._session() as db:
            return (
                db.query(WeeklyProgressData, Student)
                .join(Student, Student.id == WeeklyProgressData.student_id)
                .order_by(Student.created_at, Student.handle)
                .all()
            )


weekly_progress_repository = WeeklyProgressRepository()
