from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence

from leettrack.Core.config import get_settings
from leettrack.common.utils import today_utc
from leettrack.features.leetcode.schemas import LeetCodeStats
from leettrack.features.students.repository import StudentRepository, student_repository
from .models import Badge
from .repository import BadgeRepository, badge_repository
from .rules import BADGE_RULES, BadgeContext, BadgeRule
from .schemas import BadgeHolder, BadgeTypeSummary

logger = logging.getLogger("badges.service")


class BadgeEvaluator:
    """Grants badges by running every rule of the table against a context.

    One-time badges are skipped silently once granted. Repeatable badges are
    inserted every time their condition holds, unless the per-day cap is
    switched on in settings.
    """

    def __init__(
        self,
        repo: BadgeRepository = badge_repository,
        students: StudentRepository = student_repository,
        rules: Optional[Sequence[BadgeRule]] = None,
    ):
        self.repo = repo
        self.students = students
        self.rules = list(rules) if rules is not None else list(BADGE_RULES)
        self.settings = get_settings()
        self.log = logger

    def _already_granted(self, rule: BadgeRule, ctx: BadgeContext) -> bool:
        if not rule.repeatable:
            return self.repo.has_badge(ctx.student_id, rule.badge_type)
        if self.settings.cap_repeatable_badges_per_day:
            return self.repo.has_badge_on(ctx.student_id, rule.badge_type, ctx.as_of)
        return False

    def evaluate(self, ctx: BadgeContext) -> List[Badge]:
        granted: List[Badge] = []
        for rule in self.rules:
            if not rule.applies(ctx):
                continue
            if self._already_granted(rule, ctx):
                continue
            badge = self.repo.create_badge(
                {
                    "student_id": ctx.student_id,
                    "badge_type": rule.badge_type,
                    "title": rule.title,
                    "description": rule.description,
                    "icon": rule.icon,
                    "earned_on": ctx.as_of,
                }
            )
            self.log.info("badge.granted student_id=%s type=%s", ctx.student_id, rule.badge_type)
            granted.append(badge)
        return granted

    def evaluate_badges(
        self,
        student_id: str,
        stats: LeetCodeStats,
        daily_increment: int,
        streak: int,
        *,
        as_of: Optional[date] = None,
        active_days: int = 0,
        weekly_rank: int = 0,
        weekly_increment: int = 0,
    ) -> List[Badge]:
        ctx = BadgeContext(
            student_id=student_id,
            stats=stats,
            daily_increment=daily_increment,
            streak=streak,
            as_of=as_of or today_utc(),
            active_days=active_days,
            weekly_rank=weekly_rank,
            weekly_increment=weekly_increment,
        )
        return self.evaluate(ctx)

    def list_badges(self, student_id: str) -> List[Badge]:
        return self.repo.list_badges(student_id)

    def badge_overview(self) -> List[BadgeTypeSummary]:
        """Per badge type: how often it was awarded and to whom."""
        names = {s.id: s for s in self.students.list_students()}
        by_type: Dict[str, Dict[str, List[Badge]]] = defaultdict(lambda: defaultdict(list))
        for badge in self.repo.list_all_badges():
            by_type[badge.badge_type][badge.student_id].append(badge)

        overview: List[BadgeTypeSummary] = []
        for rule in self.rules:
            holders: List[BadgeHolder] = []
            per_student = by_type.get(rule.badge_type, {})
            for student_id, badges in per_student.items():
                student = names.get(student_id)
                if student is None:
                    continue
                holders.append(
                    BadgeHolder(
                        student_id=student_id,
                        name=student.name,
                        handle=student.handle,
                        times_earned=len(badges),
                        last_earned_on=max(b.earned_on for b in badges),
                    )
                )
            holders.sort(key=lambda h: (-h.times_earned, h.handle))
            overview.append(
                BadgeTypeSummary(
                    badge_type=rule.badge_type,
                    title=rule.title,
                    description=rule.description,
                    icon=rule.icon,
                    repeatable=rule.repeatable,
                    total_awarded=sum(h.times_earned for h in holders),
                    holders=holders,
                )
            )
        return overview


badge_evaluator = BadgeEvaluator()
