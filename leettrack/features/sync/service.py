from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import List, Optional

from leettrack.Core.config import get_settings
from leettrack.common.errors import NotFound, TrackerError
from leettrack.common.utils import current_timestamp
from leettrack.features.leetcode.client import LeetCodeClient, leetcode_client
from leettrack.features.progress.service import ProgressService, progress_service
from leettrack.features.students.models import Student
from leettrack.features.students.repository import StudentRepository, student_repository
from .models import AppSettings
from .repository import AppSettingsRepository, app_settings_repository
from .schemas import SyncStudentResult, SyncSummary

logger = logging.getLogger("sync.service")


class SyncService:
    """Pull snapshots from LeetCode and feed them to the reconciler.

    ``sync_all`` runs one independent fetch+reconcile pipeline per student,
    at most ``SYNC_CONCURRENCY`` fetches in flight. A failing student is
    tallied and the batch carries on.
    """

    def __init__(
        self,
        client: LeetCodeClient = leetcode_client,
        progress: ProgressService = progress_service,
        students: StudentRepository = student_repository,
        app_settings: AppSettingsRepository = app_settings_repository,
    ):
        self.client = client
        self.progress = progress
        self.students = students
        self.app_settings = app_settings
        self.settings = get_settings()
        self.log = logger

    async def _sync(self, student: Student, as_of: Optional[date]) -> SyncStudentResult:
        stats = await self.client.fetch_user_stats(student.handle)
        outcome = self.progress.reconcile_snapshot(student.id, stats, as_of)
        return SyncStudentResult(
            student_id=student.id,
            handle=student.handle,
            success=True,
            synced_on=outcome.daily.date,
            total_solved=outcome.daily.total_solved,
            daily_increment=outcome.daily.daily_increment,
            weekly_increment=outcome.weekly.weekly_increment,
            streak=outcome.streak,
            new_badges=[b.badge_type for b in outcome.badges],
        )

    async def sync_student(self, student_id: str, as_of: Optional[date] = None) -> SyncStudentResult:
        """Sync one student; errors propagate to the caller."""
        student = self.students.get_student(student_id)
        if student is None:
            raise NotFound(f"student not found: {student_id}")
        return await self._sync(student, as_of)

    async def _sync_guarded(
        self, student: Student, as_of: Optional[date], gate: asyncio.Semaphore
    ) -> SyncStudentResult:
        async with gate:
            try:
                return await self._sync(student, as_of)
            except TrackerError as exc:
                self.log.warning("sync.student_failed handle=%s code=%s error=%s", student.handle, exc.error_code, exc)
                return SyncStudentResult(
                    student_id=student.id,
                    handle=student.handle,
                    success=False,
                    error_code=exc.error_code,
                    error=str(exc),
                )
            except Exception as exc:  # noqa: BLE001
                self.log.exception("sync.student_crashed handle=%s", student.handle)
                return SyncStudentResult(
                    student_id=student.id,
                    handle=student.handle,
                    success=False,
                    error_code="E_INTERNAL",
                    error=str(exc),
                )

    async def sync_all(self, as_of: Optional[date] = None, batch: Optional[str] = None) -> SyncSummary:
        students = self.students.list_students(batch=batch)
        gate = asyncio.Semaphore(self.settings.sync_concurrency)
        results: List[SyncStudentResult] = await asyncio.gather(
            *(self._sync_guarded(s, as_of, gate) for s in students)
        )
        success = sum(1 for r in results if r.success)
        errors = [f"{r.handle}: {r.error}" for r in results if not r.success]
        finished = current_timestamp()
        self.app_settings.update(last_sync_time=finished)
        self.log.info("sync.all_done total=%d success=%d failed=%d", len(results), success, len(results) - success)
        return SyncSummary(success=success, failed=len(results) - success, errors=errors, finished_at=finished)

    def get_app_settings(self) -> AppSettings:
        return self.app_settings.get()

    def set_auto_sync(self, enabled: bool) -> AppSettings:
        return self.app_settings.update(is_auto_sync_enabled=enabled)


sync_service = SyncService()
