from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from .models import Student

logger = logging.getLogger("students.repository")


def default_session_factory() -> Session:
    from leettrack.DB.session import SessionLocal

    return SessionLocal()


class StudentRepository:
    """SQLAlchemy access helpers for the students table.

    Listing order is the cohort's onboarding order (created_at, then handle);
    leaderboards rely on it to break ties deterministically.
    """

    def __init__(self, session_factory: Callable[[], Session] = default_session_factory):
        self._session = session_factory

    def get_student(self, student_id: str) -> Optional[Student]:
        with self._session() as db:
            return db.get(Student, student_id)

    def get_student_by_handle(self, handle: str) -> Optional[Student]:
        with self._session() as db:
            return db.query(Student).filter(Student.handle == handle.strip()).first()

    def list_students(self, batch: Optional[str] = None) -> List[Student]:
        with self._session() as db:
            query = db.query(Student)
            if batch is not None:
                query = query.filter(Student.batch == batch)
            return query.order_by(Student.created_at, Student.handle).all()

    def list_batches(self) -> List[str]:
        with self._session() as db:
            rows = db.query(Student.batch).filter(Student.batch.isnot(None)).distinct().all()
            return sorted(r[0] for r in rows)

    def create_student(self, data: Dict[str, Any]) -> Student:
        with self._session() as db:
            student = Student(**data)
            db.add(student)
            db.commit()
            db.refresh(student)
            logger.info("student.created id=%s handle=%s", student.id, student.handle)
            return student

    def update_student(self, student_id: str, fields: Dict[str, Any]) -> Optional[Student]:
        with self._session() as db:
            student = db.get(Student, student_id)
            if student is None:
                return None
            for key, value in fields.items():
                setattr(student, key, value)
            db.commit()
            db.refresh(student)
            return student

    def delete_student(self, student_id: str) -> bool:
        """Delete a student and, through the ORM cascade, all child rows."""
        with self._session() as db:
            student = db.get(Student, student_id)
            if student is None:
                return False
            db.delete(student)
            db.commit()
            logger.warning("student.deleted id=%s handle=%s", student.id, student.handle)
            return True


student_repository = StudentRepository()
