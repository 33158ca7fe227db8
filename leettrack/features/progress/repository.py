from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from leettrack.features.students.models import Student
from leettrack.features.students.repository import default_session_factory
from .models import DailyProgress, WeeklyTrend

logger = logging.getLogger("progress.repository")


class ProgressRepository:
    """Daily and weekly time series storage.

    Writes are upserts keyed by (student_id, date) and (student_id,
    week_start). Should a duplicate row exist anyway (legacy data, a race
    before the unique constraint was added) the first row wins, the rest are
    removed and the event is logged as inconsistent.
    """

    def __init__(self, session_factory: Callable[[], Session] = default_session_factory):
        self._session = session_factory

    # --- Daily ------------------------------------------------------------

    def get_daily_progress(self, student_id: str, day: date) -> Optional[DailyProgress]:
        with self._session() as db:
            return (
                db.query(DailyProgress)
                .filter(DailyProgress.student_id == student_id, DailyProgress.date == day)
                .first()
            )

    def get_latest_daily_before(self, student_id: str, day: date) -> Optional[DailyProgress]:
        with self._session() as db:
            return (
                db.query(DailyProgress)
                .filter(DailyProgress.student_id == student_id, DailyProgress.date < day)
                .order_by(DailyProgress.date.desc())
                .first()
            )

    def get_latest_daily(self, student_id: str) -> Optional[DailyProgress]:
        with self._session() as db:
            return (
                db.query(DailyProgress)
                .filter(DailyProgress.student_id == student_id)
                .order_by(DailyProgress.date.desc())
                .first()
            )

    def list_daily_progress(self, student_id: str, limit: int = 30) -> List[DailyProgress]:
        """Most recent first."""
        with self._session() as db:
            return (
                db.query(DailyProgress)
                .filter(DailyProgress.student_id == student_id)
                .order_by(DailyProgress.date.desc())
                .limit(limit)
                .all()
            )

    def list_daily_progress_until(self, student_id: str, day: date, limit: int = 30) -> List[DailyProgress]:
        """Most recent first, on or before ``day``."""
        with self._session() as db:
            return (
                db.query(DailyProgress)
                .filter(DailyProgress.student_id == student_id, DailyProgress.date <= day)
                .order_by(DailyProgress.date.desc())
                .limit(limit)
                .all()
            )

    def upsert_daily_progress(self, student_id: str, day: date, fields: Dict[str, Any]) -> DailyProgress:
        with self._session() as db:
            rows = (
                db.query(DailyProgress)
                .filter(DailyProgress.student_id == student_id, DailyProgress.date == day)
                .order_by(DailyProgress.created_at)
                .all()
            )
            if len(rows) > 1:
                logger.warning(
                    "inconsistent daily_progress duplicates student_id=%s date=%s count=%d",
                    student_id,
                    day,
                    len(rows),
                )
                for extra in rows[1:]:
                    db.delete(extra)
            if rows:
                entry = rows[0]
                for key, value in fields.items():
                    setattr(entry, key, value)
            else:
                entry = DailyProgress(student_id=student_id, date=day, **fields)
                db.add(entry)
            db.commit()
            db.refresh(entry)
            return entry

    # --- Weekly -----------------------------------------------------------

    def get_weekly_trend(self, student_id: str, week_start: date) -> Optional[WeeklyTrend]:
        with self._session() as db:
            return (
                db.query(WeeklyTrend)
                .filter(WeeklyTrend.student_id == student_id, WeeklyTrend.week_start == week_start)
                .first()
            )

    def get_latest_trend_before(self, student_id: str, week_start: date) -> Optional[WeeklyTrend]:
        with self._session() as db:
            return (
                db.query(WeeklyTrend)
                .filter(WeeklyTrend.student_id == student_id, WeeklyTrend.week_start < week_start)
                .order_by(WeeklyTrend.week_start.desc())
                .first()
            )

    def list_weekly_trends(self, student_id: str, limit: int = 12) -> List[WeeklyTrend]:
        """Most recent first."""
        with self._session() as db:
            return (
                db.query(WeeklyTrend)
                .filter(WeeklyTrend.student_id == student_id)
                .order_by(WeeklyTrend.week_start.desc())
                .limit(limit)
                .all()
            )

    def list_week_entries(self, week_start: date, batch: Optional[str] = None) -> List[WeeklyTrend]:
        """All students' buckets for one week, in student onboarding order."""
        with self._session() as db:
            query = (
                db.query(WeeklyTrend)
                .join(Student, Student.id == WeeklyTrend.student_id)
                .filter(WeeklyTrend.week_start == week_start)
            )
            if batch is not None:
                query = query.filter(Student.batch == batch)
            return query.order_by(Student.created_at, Student.handle).all()

    def upsert_weekly_trend(self, student_id: str, week_start: date, fields: Dict[str, Any]) -> WeeklyTrend:
        with self._session() as db:
            rows = (
                db.query(WeeklyTrend)
                .filter(WeeklyTrend.student_id == student_id, WeeklyTrend.week_start == week_start)
                .order_by(WeeklyTrend.created_at)
                .all()
            )
            if len(rows) > 1:
                logger.warning(
                    "inconsistent weekly_trends duplicates student_id=%s week_start=%s count=%d",
                    student_id,
                    week_start,
                    len(rows),
                )
                for extra in rows[1:]:
                    db.delete(extra)
            if rows:
                entry = rows[0]
                for key, value in fields.items():
                    setattr(entry, key, value)
            else:
                entry = WeeklyTrend(student_id=student_id, week_start=week_start, **fields)
                db.add(entry)
            db.commit()
            db.refresh(entry)
            return entry


progress_repository = ProgressRepository()
