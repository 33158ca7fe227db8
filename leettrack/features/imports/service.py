from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import List, Optional, Sequence

from leettrack.common.errors import MalformedInput, NotFound, TrackerError
from leettrack.common.utils import today_utc, week_bounds
from leettrack.features.progress.repository import ProgressRepository, progress_repository
from leettrack.features.students.repository import StudentRepository, student_repository
from .csv_parser import parse_number, read_rows
from .models import WeeklyProgressData
from .repository import WeeklyProgressRepository, weekly_progress_repository
from .schemas import (
    ImportStats,
    RosterImportStats,
    WeeklyIncrements,
    WeeklyProgressView,
    WeeklyScores,
    WeeklyStudent,
    WeeklySummary,
)

logger = logging.getLogger("imports.service")

# Name, Handle, ProfileLink, Week1..Week4
WEEKLY_MIN_COLUMNS = 7
CURRENT_WEEK_COLUMN = 7
# Name, Handle
ROSTER_MIN_COLUMNS = 2


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def weekly_fields(weeks: Sequence[int], current: Optional[int]) -> dict:
    """Derive the stored grid row from the four week cells and the optional current week."""
    w1, w2, w3, w4 = weeks
    deltas = [w2 - w1, w3 - w2, w4 - w3]
    last_to_current = 0
    if current is not None:
        last_to_current = current - w4
        deltas.append(last_to_current)
    return {
        "week1_score": w1,
        "week2_score": w2,
        "week3_score": w3,
        "week4_score": w4,
        "current_week_score": current,
        "week2_progress": deltas[0],
        "week3_progress": deltas[1],
        "week4_progress": deltas[2],
        "last_week_to_current_increment": last_to_current,
        "total_score": w1 + w2 + w3 + w4 + (current or 0),
        "average_weekly_growth": round_half_up(sum(deltas) / len(deltas)),
    }


class ImportService:
    """Batch entry points fed from spreadsheet exports.

    Every row is handled on its own: a bad row is counted as skipped, its
    message lands in ``errors``, and the import moves on.
    """

    def __init__(
        self,
        students: StudentRepository = student_repository,
        weekly: WeeklyProgressRepository = weekly_progress_repository,
        progress: ProgressRepository = progress_repository,
    ):
        self.students = students
        self.weekly = weekly
        self.progress = progress

    # --- Weekly snapshot ----------------------------------------------------

    def import_weekly_snapshot(
        self,
        rows: Sequence[Sequence[str]],
        backfill_trends: bool = False,
        as_of_date: Optional[date] = None,
    ) -> ImportStats:
        stats = ImportStats()
        for line_no, row in enumerate(rows, start=1):
            try:
                self._import_weekly_row(row, stats, backfill_trends, as_of_date or today_utc())
            except TrackerError as exc:
                stats.skipped += 1
                stats.errors.append(f"row {line_no}: {exc}")
        logger.info(
            "import.weekly imported=%d updated=%d skipped=%d errors=%d",
            stats.imported,
            stats.updated,
            stats.skipped,
            len(stats.errors),
        )
        return stats

    def import_weekly_snapshot_csv(
        self, text: str, backfill_trends: bool = False, as_of_date: Optional[date] = None
    ) -> ImportStats:
        return self.import_weekly_snapshot(read_rows(text), backfill_trends=backfill_trends, as_of_date=as_of_date)

    def _import_weekly_row(self, row: Sequence[str], stats: ImportStats, backfill: bool, as_of: date) -> None:
        if len(row) < WEEKLY_MIN_COLUMNS:
            raise MalformedInput(f"expected at least {WEEKLY_MIN_COLUMNS} columns, got {len(row)}")
        handle = (row[1] or "").strip()
        if not handle:
            stats.skipped += 1
            return
        student = self.students.get_student_by_handle(handle)
        if student is None:
            raise NotFound(f"Student not found: {handle}")

        weeks = [parse_number(c) for c in row[3:WEEKLY_MIN_COLUMNS]]
        current = None
        if len(row) > CURRENT_WEEK_COLUMN and str(row[CURRENT_WEEK_COLUMN]).strip():
            current = parse_number(row[CURRENT_WEEK_COLUMN])

        _, created = self.weekly.upsert(student.id, weekly_fields(weeks, current))
        if created:
            stats.imported += 1
        else:
            stats.updated += 1

        if backfill:
            values = weeks + ([current] if current is not None else [])
            self._backfill_trends(student.id, values, as_of)

    def _backfill_trends(self, student_id: str, values: Sequence[int], as_of: date) -> None:
        """Week k of N lands on the k-th of N consecutive weeks ending with the current one."""
        current_start, _ = week_bounds(as_of)
        first_start = current_start - timedelta(weeks=len(values) - 1)
        previous: Optional[int] = None
        for k, value in enumerate(values):
            week_start = first_start + timedelta(weeks=k)
            self.progress.upsert_weekly_trend(
                student_id,
                week_start,
                {
                    "week_end": week_start + timedelta(days=6),
                    "total_problems": value,
                    "weekly_increment": value if previous is None else value - previous,
                },
            )
            previous = value

    # --- Roster ---------------------------------------------------------------

    def import_roster(self, rows: Sequence[Sequence[str]]) -> RosterImportStats:
        """Name, Handle, ProfileLink[, Batch]: create missing students, refresh the rest."""
        stats = RosterImportStats()
        for line_no, row in enumerate(rows, start=1):
            if len(row) < ROSTER_MIN_COLUMNS:
                stats.skipped += 1
                stats.errors.append(f"row {line_no}: expected at least {ROSTER_MIN_COLUMNS} columns, got {len(row)}")
                continue
            name = (row[0] or "").strip()
            handle = (row[1] or "").strip()
            if not handle:
                stats.skipped += 1
                continue
            link = (row[2] or "").strip() if len(row) > 2 else ""
            batch = (row[3] or "").strip() if len(row) > 3 else ""
            fields = {"name": name or handle, "profile_link": link or f"https://leetcode.com/u/{handle}/"}
            if batch:
                fields["batch"] = batch

            existing = self.students.get_student_by_handle(handle)
            if existing is None:
                self.students.create_student({"handle": handle, **fields})
                stats.created += 1
            else:
                self.students.update_student(existing.id, fields)
                stats.updated += 1
        logger.info(
            "import.roster created=%d updated=%d skipped=%d", stats.created, stats.updated, stats.skipped
        )
        return stats

    def import_roster_csv(self, text: str) -> RosterImportStats:
        return self.import_roster(read_rows(text))

    # --- Views ----------------------------------------------------------------

    @staticmethod
    def _view(row: WeeklyProgressData, student) -> WeeklyProgressView:
        return WeeklyProgressView(
            student=WeeklyStudent(
                name=student.name, handle=student.handle, profile_link=student.profile_link, batch=student.batch
            ),
            weekly_data=WeeklyScores(
                week1=row.week1_score,
                week2=row.week2_score,
                week3=row.week3_score,
                week4=row.week4_score,
                current_week=row.current_week_score,
            ),
            progress_increments=WeeklyIncrements(
                week2_progress=row.week2_progress,
                week3_progress=row.week3_progress,
                week4_progress=row.week4_progress,
                last_week_to_current_increment=row.last_week_to_current_increment,
            ),
            summary=WeeklySummary(total_score=row.total_score, average_weekly_growth=row.average_weekly_growth),
            updated_at=row.updated_at,
        )

    def weekly_progress_grid(self) -> List[WeeklyProgressView]:
        return [self._view(row, student) for row, student in self.weekly.list_with_students()]

    def student_weekly_progress(self, handle: str) -> WeeklyProgressView:
        student = self.students.get_student_by_handle(handle)
        if student is None:
            raise NotFound(f"student not found: {handle}")
        row = self.weekly.get_for_student(student.id)
        if row is None:
            raise NotFound(f"no weekly progress recorded for {handle}")
        return self._view(row, student)


import_service = ImportService()
