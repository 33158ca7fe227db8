from __future__ import annotations

import csv
import io
import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy.exc import OperationalError

from leettrack.Core.config import get_settings
from leettrack.common.utils import today_utc, week_bounds
from leettrack.features.badges.service import BadgeEvaluator, badge_evaluator
from leettrack.features.leetcode.schemas import LeetCodeStats
from leettrack.features.progress.service import ProgressService, progress_service
from leettrack.features.progress.streaks import StreakCalculator, max_streak_from_entries
from leettrack.features.students.models import Student
from leettrack.features.students.repository import StudentRepository, student_repository
from leettrack.common.errors import NotFound
from .schemas import (
    AdminDashboardOut,
    AnalyticsOut,
    AnalyticsSummary,
    DailyActivity,
    ExportRow,
    LeaderboardEntry,
    StudentDashboardOut,
    StudentImprovement,
    StudentRef,
    StudentRow,
    WeekPoint,
)

logger = logging.getLogger("dashboard.service")

EXCELLENT_WEEKLY = 15
ACTIVE_WEEKLY = 5
UNDERPERFORMING_BELOW = 5
TOP_STUDENTS = 10
TOP_IMPROVERS = 15

EXPORT_HEADERS = ["Name", "LeetCode Username", "Total Solved", "Weekly Progress", "Streak", "Status"]


def status_for(weekly_progress: int) -> str:
    if weekly_progress >= EXCELLENT_WEEKLY:
        return "Excellent"
    if weekly_progress >= ACTIVE_WEEKLY:
        return "Active"
    return "Underperforming"


def rank_rows(rows: Sequence[StudentRow], limit: Optional[int] = None) -> List[LeaderboardEntry]:
    """Order by weekly progress, highest first; equal scores keep input order."""
    ordered = sorted(rows, key=lambda r: -r.weekly_progress)
    if limit is not None:
        ordered = ordered[:limit]
    return [
        LeaderboardEntry(rank=idx + 1, student=row.student, weekly_score=row.weekly_progress)
        for idx, row in enumerate(ordered)
    ]


def summarize(rows: Sequence[StudentRow], leaderboard_size: int) -> AdminDashboardOut:
    total = len(rows)
    avg = round(sum(r.stats.total_solved for r in rows) / total, 2) if total else 0.0
    return AdminDashboardOut(
        total_students=total,
        active_students=sum(1 for r in rows if r.weekly_progress > 0),
        avg_problems=avg,
        underperforming=sum(1 for r in rows if r.weekly_progress < UNDERPERFORMING_BELOW),
        students=list(rows),
        leaderboard=rank_rows(rows, leaderboard_size),
    )


class DashboardService:
    """Read-only views assembled from the stored series."""

    def __init__(
        self,
        students: StudentRepository = student_repository,
        progress: ProgressService = progress_service,
        badges: BadgeEvaluator = badge_evaluator,
        streaks: Optional[StreakCalculator] = None,
    ):
        self.students = students
        self.progress = progress
        self.badges = badges
        self.streaks = streaks or progress.streaks
        self.settings = get_settings()

    def _stats_for(self, student_id: str) -> LeetCodeStats:
        return LeetCodeStats.from_daily(self.progress.latest_daily_progress(student_id))

    def _row(self, student: Student, today: date) -> StudentRow:
        ref = StudentRef.model_validate(student)
        try:
            stats = self._stats_for(student.id)
            trend = self.progress.get_week_trend(student.id, today)
            weekly = trend.weekly_increment if trend else 0
            streak = self.streaks.calculate_streak(student.id, today=today)
        except OperationalError:
            raise
        except Exception:
            logger.exception("dashboard.student_failed handle=%s", student.handle)
            stats, weekly, streak = LeetCodeStats.zero(), 0, 0
        return StudentRow(student=ref, stats=stats, weekly_progress=weekly, streak=streak, status=status_for(weekly))

    def student_rows(self, batch: Optional[str] = None, today: Optional[date] = None) -> List[StudentRow]:
        day = today or today_utc()
        return [self._row(s, day) for s in self.students.list_students(batch=batch)]

    def assemble_admin_dashboard(self, today: Optional[date] = None) -> AdminDashboardOut:
        return summarize(self.student_rows(today=today), self.settings.leaderboard_size)

    def assemble_batch_dashboard(self, batch: str, today: Optional[date] = None) -> AdminDashboardOut:
        return summarize(self.student_rows(batch=batch, today=today), self.settings.leaderboard_size)

    def leaderboard(
        self, batch: Optional[str] = None, limit: Optional[int] = None, today: Optional[date] = None
    ) -> List[LeaderboardEntry]:
        size = limit if limit is not None else self.settings.leaderboard_size
        return rank_rows(self.student_rows(batch=batch, today=today), size)

    def assemble_student_dashboard(self, handle: str, today: Optional[date] = None) -> StudentDashboardOut:
        student = self.students.get_student_by_handle(handle)
        if student is None:
            raise NotFound(f"student not found: {handle}")
        day = today or today_utc()
        trends = self.progress.list_weekly_trends(student.id, weeks=12)
        daily = self.progress.list_daily_progress(student.id, days=30)
        return StudentDashboardOut(
            student=StudentRef.model_validate(student),
            stats=self._stats_for(student.id),
            current_streak=self.streaks.calculate_streak(student.id, today=day),
            longest_streak=max_streak_from_entries(daily, self.settings.active_day_threshold),
            weekly_rank=self.progress.week_rank_of(student.id, day),
            badges=self.badges.list_badges(student.id),
            weekly_progress=[
                WeekPoint(week_start=t.week_start, total_problems=t.total_problems, weekly_increment=t.weekly_increment)
                for t in reversed(trends)
            ],
            daily_activity=[DailyActivity(day=d.date, count=d.daily_increment) for d in reversed(daily)],
        )

    def analytics(self, today: Optional[date] = None) -> AnalyticsOut:
        """Current totals against the totals at the end of last week."""
        week_start, _ = week_bounds(today or today_utc())
        items: List[StudentImprovement] = []
        for student in self.students.list_students():
            latest = self.progress.latest_daily_progress(student.id)
            previous = self.progress.latest_daily_before(student.id, week_start)
            current = latest.total_solved if latest else 0
            before = previous.total_solved if previous else 0
            improvement = current - before
            items.append(
                StudentImprovement(
                    student=StudentRef.model_validate(student),
                    current_solved=current,
                    previous_solved=before,
                    improvement=improvement,
                    status="improved" if improvement > 0 else "declined" if improvement < 0 else "same",
                )
            )

        total = len(items)
        summary = AnalyticsSummary(
            total_students=total,
            improved=sum(1 for i in items if i.status == "improved"),
            declined=sum(1 for i in items if i.status == "declined"),
            same=sum(1 for i in items if i.status == "same"),
            average_improvement=round(sum(i.improvement for i in items) / total, 2) if total else 0.0,
        )
        top_students = sorted(items, key=lambda i: -i.current_solved)[:TOP_STUDENTS]
        top_improvers = sorted((i for i in items if i.improvement > 0), key=lambda i: -i.improvement)[:TOP_IMPROVERS]
        return AnalyticsOut(summary=summary, top_students=top_students, top_improvers=top_improvers, students=items)

    def export_rows(self, today: Optional[date] = None) -> List[ExportRow]:
        return [
            ExportRow(
                name=row.student.name,
                handle=row.student.handle,
                total_solved=row.stats.total_solved,
                weekly_progress=row.weekly_progress,
                streak=row.streak,
                status=row.status,
            )
            for row in self.student_rows(today=today)
        ]

    def export_csv(self, today: Optional[date] = None) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(EXPORT_HEADERS)
        for row in self.export_rows(today=today):
            writer.writerow([row.name, row.handle, row.total_solved, row.weekly_progress, row.streak, row.status])
        return buf.getvalue()


dashboard_service = DashboardService()
