"""Declarative badge rule table.

Each rule is a (predicate, badge_type, repeatable) triple plus display
metadata. Rules are evaluated independently; adding a badge means adding a
row here, not another branch in the evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List

from leettrack.features.leetcode.schemas import LeetCodeStats


@dataclass
class BadgeContext:
    """Everything a rule may look at for one student at one sync."""

    student_id: str
    stats: LeetCodeStats
    daily_increment: int
    streak: int
    as_of: date
    active_days: int = 0
    weekly_rank: int = 0
    weekly_increment: int = 0


@dataclass(frozen=True)
class BadgeRule:
    badge_type: str
    title: str
    description: str
    icon: str
    predicate: Callable[[BadgeContext], bool] = field(compare=False)
    repeatable: bool = False

    def applies(self, ctx: BadgeContext) -> bool:
        return bool(self.predicate(ctx))


CENTURY_THRESHOLD = 100
PROBLEM_HUNTER_THRESHOLD = 500
HARD_MODE_THRESHOLD = 50
PERFECTIONIST_ACCEPTANCE = 90.0
STREAK_MASTER_DAYS = 7
CONSISTENCY_DAYS = 30
COMEBACK_DAILY_INCREMENT = 10

BADGE_RULES: List[BadgeRule] = [
    BadgeRule(
        badge_type="century_coder",
        title="Century Coder",
        description="100+ total problems solved",
        icon="fas fa-code",
        predicate=lambda c: c.stats.total_solved >= CENTURY_THRESHOLD,
    ),
    BadgeRule(
        badge_type="problem_hunter",
        title="Problem Hunter",
        description="500+ total problems solved",
        icon="fas fa-crosshairs",
        predicate=lambda c: c.stats.total_solved >= PROBLEM_HUNTER_THRESHOLD,
    ),
    BadgeRule(
        badge_type="hard_mode",
        title="Hard Mode",
        description="50+ hard problems solved",
        icon="fas fa-skull",
        predicate=lambda c: c.stats.hard_solved >= HARD_MODE_THRESHOLD,
    ),
    BadgeRule(
        badge_type="perfectionist",
        title="Perfectionist",
        description="Acceptance rate of 90% or more",
        icon="fas fa-bullseye",
        predicate=lambda c: c.stats.acceptance_rate >= PERFECTIONIST_ACCEPTANCE,
    ),
    BadgeRule(
        badge_type="streak_master",
        title="Streak Master",
        description="7-day streak of 5+ daily problems",
        icon="fas fa-fire",
        predicate=lambda c: c.streak >= STREAK_MASTER_DAYS,
    ),
    BadgeRule(
        badge_type="consistency_champ",
        title="Consistency Champ",
        description="Completed 30-day challenge",
        icon="fas fa-calendar-check",
        predicate=lambda c: c.active_days >= CONSISTENCY_DAYS,
    ),
    BadgeRule(
        badge_type="weekly_topper",
        title="Weekly Topper",
        description="Top performer this week",
        icon="fas fa-trophy",
        predicate=lambda c: c.weekly_rank == 1 and c.weekly_increment > 0,
    ),
    BadgeRule(
        badge_type="comeback_coder",
        title="Comeback Coder",
        description="10+ problems solved in a single day",
        icon="fas fa-chart-line",
        predicate=lambda c: c.daily_increment >= COMEBACK_DAILY_INCREMENT,
        repeatable=True,
    ),
]

RULES_BY_TYPE: Dict[str, BadgeRule] = {rule.badge_type: rule for rule in BADGE_RULES}
