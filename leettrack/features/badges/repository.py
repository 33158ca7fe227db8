from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, List

from sqlalchemy.orm import Session

from leettrack.features.students.repository import default_session_factory
from .models import Badge

logger = logging.getLogger("badges.repository")


class BadgeRepository:
    def __init__(self, session_factory: Callable[[], Session] = default_session_factory):
        self._session = session_factory

    def has_badge(self, student_id: str, badge_type: str) -> bool:
        with self._session() as db:
            return (
                db.query(Badge.id)
                .filter(Badge.student_id == student_id, Badge.badge_type == badge_type)
                .first()
                is not None
            )

    def has_badge_on(self, student_id: str, badge_type: str, day: date) -> bool:
        with self._session() as db:
            return (
                db.query(Badge.id)
                .filter(Badge.student_id == student_id, Badge.badge_type == badge_type, Badge.earned_on == day)
                .first()
                is not None
            )

    def create_badge(self, data: Dict[str, Any]) -> Badge:
        with self._session() as db:
            badge = Badge(**data)
            db.add(badge)
            db.commit()
            db.refresh(badge)
            return badge

    def list_badges(self, student_id: str) -> List[Badge]:
        """Newest first."""
        with self._session() as db:
            return (
                db.query(Badge)
                .filter(Badge.student_id == student_id)
                .order_by(Badge.earned_at.desc(), Badge.earned_on.desc())
                .all()
            )

    def list_all_badges(self) -> List[Badge]:
        with self._session() as db:
            return db.query(Badge).order_by(Badge.earned_on, Badge.earned_at).all()


badge_repository = BadgeRepository()
