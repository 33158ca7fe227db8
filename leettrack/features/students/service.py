from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from leettrack.common.errors import Inconsistent, MalformedInput, NotFound
from leettrack.features.progress.repository import ProgressRepository, progress_repository
from .models import Student
from .repository import StudentRepository, student_repository
from .schemas import StudentCreate, StudentUpdate

logger = logging.getLogger("students.service")


class StudentService:
    """Onboarding and the explicit admin deletions.

    Deleting a student removes its daily entries, weekly trends, badges and
    weekly-progress row along with it.
    """

    def __init__(
        self,
        repo: StudentRepository = student_repository,
        progress: ProgressRepository = progress_repository,
    ):
        self.repo = repo
        self.progress = progress

    def onboard(self, payload: StudentCreate) -> Student:
        handle = payload.handle.strip()
        if not handle:
            raise MalformedInput("handle must not be blank")
        if self.repo.get_student_by_handle(handle) is not None:
            raise Inconsistent(f"student with handle '{handle}' already exists")
        profile_link = payload.profile_link or f"https://leetcode.com/u/{handle}/"
        return self.repo.create_student(
            {"name": payload.name.strip(), "handle": handle, "profile_link": profile_link, "batch": payload.batch}
        )

    def update_profile(self, handle: str, payload: StudentUpdate) -> Student:
        student = self.get_by_handle(handle)
        fields: Dict[str, Any] = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not fields:
            return student
        return self.repo.update_student(student.id, fields)

    def get_by_handle(self, handle: str) -> Student:
        student = self.repo.get_student_by_handle(handle)
        if student is None:
            raise NotFound(f"student not found: {handle}")
        return student

    def list_students(self, batch: Optional[str] = None) -> List[Student]:
        return self.repo.list_students(batch=batch)

    def list_batches(self) -> List[str]:
        return self.repo.list_batches()

    def delete_by_handle(self, handle: str) -> None:
        student = self.get_by_handle(handle)
        self.repo.delete_student(student.id)

    def bulk_delete(self, handles: Sequence[str]) -> Tuple[int, int]:
        """Returns (deleted, failed); an unknown handle counts as failed."""
        deleted = failed = 0
        for handle in handles:
            student = self.repo.get_student_by_handle(handle)
            if student is None or not self.repo.delete_student(student.id):
                failed += 1
                continue
            deleted += 1
        logger.info("students.bulk_delete deleted=%d failed=%d", deleted, failed)
        return deleted, failed

    def students_with_zero_questions(self) -> List[Student]:
        """Students whose latest recorded total is 0, or who were never synced."""
        zero: List[Student] = []
        for student in self.repo.list_students():
            latest = self.progress.get_latest_daily(student.id)
            if latest is None or latest.total_solved == 0:
                zero.append(student)
        return zero

    def remove_students_with_zero_questions(self) -> List[Student]:
        removed = []
        for student in self.students_with_zero_questions():
            if self.repo.delete_student(student.id):
                removed.append(student)
        logger.warning("students.cleanup_zero removed=%d", len(removed))
        return removed


student_service = StudentService()
