"""Streak computations over a student's daily series.

A streak is anchored on *today*: entry ``i`` of the most-recent-first list
must be dated exactly ``today - i`` days and have an increment of at least
the active-day threshold. The walk stops at the first gap or weak day, so a
student who has not been synced yet today has a streak of 0.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional, Sequence

from leettrack.Core.config import get_settings
from leettrack.common.utils import today_utc
from .repository import ProgressRepository, progress_repository


def streak_from_entries(entries: Sequence, threshold: int, today: date) -> int:
    """``entries`` must be ordered most recent first."""
    streak = 0
    for i, entry in enumerate(entries):
        if entry.date != today - timedelta(days=i):
            break
        if entry.daily_increment < threshold:
            break
        streak += 1
    return streak


def max_streak_from_entries(entries: Sequence, threshold: int) -> int:
    """Longest run of consecutive qualifying days anywhere in ``entries``."""
    best = 0
    run = 0
    prev: Optional[date] = None
    for entry in sorted(entries, key=lambda e: e.date):
        if entry.daily_increment >= threshold:
            consecutive = prev is not None and entry.date - prev == timedelta(days=1)
            run = run + 1 if consecutive else 1
            best = max(best, run)
        else:
            run = 0
        prev = entry.date
    return best


def count_active_days(entries: Sequence) -> int:
    return sum(1 for e in entries if e.daily_increment > 0)


class StreakCalculator:
    def __init__(self, repo: ProgressRepository = progress_repository):
        self.repo = repo
        self.settings = get_settings()

    def calculate_streak(
        self,
        student_id: str,
        active_day_threshold: Optional[int] = None,
        today: Optional[date] = None,
    ) -> int:
        threshold = self.settings.active_day_threshold if active_day_threshold is None else active_day_threshold
        anchor = today or today_utc()
        entries = self.repo.list_daily_progress_until(
            student_id, anchor, limit=self.settings.streak_lookback_days + 1
        )
        return streak_from_entries(entries, threshold, anchor)


streak_calculator = StreakCalculator()
