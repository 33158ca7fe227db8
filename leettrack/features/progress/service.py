from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Tuple

from leettrack.common.errors import NotFound
from leettrack.common.utils import today_utc, week_bounds
from leettrack.features.badges.models import Badge
from leettrack.features.badges.service import BadgeEvaluator, badge_evaluator
from leettrack.features.leetcode.schemas import LeetCodeStats
from leettrack.features.students.repository import StudentRepository, student_repository
from .models import DailyProgress, WeeklyTrend
from .repository import ProgressRepository, progress_repository
from .streaks import StreakCalculator, count_active_days

logger = logging.getLogger("progress.service")

CONSISTENCY_WINDOW_DAYS = 30


@dataclass
class ReconcileOutcome:
    daily: DailyProgress
    weekly: WeeklyTrend
    streak: int
    badges: List[Badge] = field(default_factory=list)


class ProgressService:
    """Turns raw snapshots into the daily and weekly series.

    Daily increments are always measured against the most recent entry
    strictly before the snapshot's date, never against the row being
    overwritten, so re-syncing the same day any number of times converges to
    the same state. Weekly buckets follow the same rule against the most
    recent bucket before the current week.
    """

    def __init__(
        self,
        repo: ProgressRepository = progress_repository,
        students: StudentRepository = student_repository,
        badges: BadgeEvaluator = badge_evaluator,
        streaks: Optional[StreakCalculator] = None,
    ):
        self.repo = repo
        self.students = students
        self.badges = badges
        self.streaks = streaks or StreakCalculator(repo)
        self.log = logger

    def _require_student(self, student_id: str):
        student = self.students.get_student(student_id)
        if student is None:
            raise NotFound(f"student not found: {student_id}")
        return student

    # --- Daily ------------------------------------------------------------

    def _upsert_daily(self, student_id: str, snapshot: LeetCodeStats, day: date) -> DailyProgress:
        prior = self.repo.get_latest_daily_before(student_id, day)
        prior_total = prior.total_solved if prior else 0
        increment = snapshot.total_solved - prior_total
        if increment < 0:
            self.log.warning(
                "daily.decrease student_id=%s date=%s prior=%d total=%d",
                student_id,
                day,
                prior_total,
                snapshot.total_solved,
            )
        return self.repo.upsert_daily_progress(
            student_id,
            day,
            {
                "total_solved": snapshot.total_solved,
                "easy_solved": snapshot.easy_solved,
                "medium_solved": snapshot.medium_solved,
                "hard_solved": snapshot.hard_solved,
                "daily_increment": increment,
            },
        )

    def record_daily_snapshot(
        self, student_id: str, snapshot: LeetCodeStats, as_of_date: Optional[date] = None
    ) -> DailyProgress:
        return self.reconcile_snapshot(student_id, snapshot, as_of_date).daily

    def reconcile_snapshot(
        self, student_id: str, snapshot: LeetCodeStats, as_of_date: Optional[date] = None
    ) -> ReconcileOutcome:
        """Record the snapshot, then refresh this student's week, streak and badges."""
        self._require_student(student_id)
        day = as_of_date or today_utc()

        daily = self._upsert_daily(student_id, snapshot, day)

        # The bucket holds the total at the latest synced day of its week,
        # which is not ``day`` when an earlier day is being corrected.
        _, week_end = week_bounds(day)
        latest_in_week = self.repo.get_latest_daily_before(student_id, week_end + timedelta(days=1))
        week_total = latest_in_week.total_solved if latest_in_week else snapshot.total_solved
        weekly = self._upsert_weekly(student_id, week_total, day)

        streak = self.streaks.calculate_streak(student_id, today=day)
        recent = self.repo.list_daily_progress(student_id, limit=CONSISTENCY_WINDOW_DAYS)
        granted = self.badges.evaluate_badges(
            student_id,
            snapshot,
            daily.daily_increment,
            streak,
            as_of=day,
            active_days=count_active_days(recent),
            weekly_rank=self.week_rank_of(student_id, day),
            weekly_increment=weekly.weekly_increment,
        )
        self.log.info(
            "progress.reconciled student_id=%s date=%s total=%d daily=%d weekly=%d streak=%d badges=%d",
            student_id,
            day,
            daily.total_solved,
            daily.daily_increment,
            weekly.weekly_increment,
            streak,
            len(granted),
        )
        return ReconcileOutcome(daily=daily, weekly=weekly, streak=streak, badges=granted)

    def get_daily_progress(self, student_id: str, day: date) -> Optional[DailyProgress]:
        return self.repo.get_daily_progress(student_id, day)

    def list_daily_progress(self, student_id: str, days: int = 30) -> List[DailyProgress]:
        return self.repo.list_daily_progress(student_id, limit=days)

    def latest_daily_progress(self, student_id: str) -> Optional[DailyProgress]:
        return self.repo.get_latest_daily(student_id)

    def latest_daily_before(self, student_id: str, day: date) -> Optional[DailyProgress]:
        return self.repo.get_latest_daily_before(student_id, day)

    # --- Weekly -----------------------------------------------------------

    def _upsert_weekly(self, student_id: str, total_solved: int, as_of: date) -> WeeklyTrend:
        week_start, week_end = week_bounds(as_of)
        previous = self.repo.get_latest_trend_before(student_id, week_start)
        baseline = previous.total_problems if previous else 0
        return self.repo.upsert_weekly_trend(
            student_id,
            week_start,
            {
                "week_end": week_end,
                "total_problems": total_solved,
                "weekly_increment": total_solved - baseline,
            },
        )

    def update_weekly_trend(
        self, student_id: str, total_solved: int, as_of_date: Optional[date] = None
    ) -> WeeklyTrend:
        self._require_student(student_id)
        return self._upsert_weekly(student_id, total_solved, as_of_date or today_utc())

    def get_week_trend(self, student_id: str, as_of_date: Optional[date] = None) -> Optional[WeeklyTrend]:
        week_start, _ = week_bounds(as_of_date or today_utc())
        return self.repo.get_weekly_trend(student_id, week_start)

    def list_weekly_trends(self, student_id: str, weeks: int = 12) -> List[WeeklyTrend]:
        return self.repo.list_weekly_trends(student_id, limit=weeks)

    def rank_week(self, week_start: date, batch: Optional[str] = None) -> List[Tuple[int, WeeklyTrend]]:
        """Rank the cohort for one week by weekly increment.

        Ties keep student onboarding order (``sorted`` is stable).
        """
        entries = self.repo.list_week_entries(week_start, batch=batch)
        ordered = sorted(entries, key=lambda e: -e.weekly_increment)
        return [(idx + 1, entry) for idx, entry in enumerate(ordered)]

    def week_rank_of(self, student_id: str, as_of_date: Optional[date] = None, batch: Optional[str] = None) -> int:
        week_start, _ = week_bounds(as_of_date or today_utc())
        for rank, entry in self.rank_week(week_start, batch=batch):
            if entry.student_id == student_id:
                return rank
        return 0


progress_service = ProgressService()
