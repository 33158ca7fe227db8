from datetime import timedelta

import pytest

from conftest import TODAY, stats
from leettrack.Core.config import get_settings
from leettrack.features.badges.repository import badge_repository
from leettrack.features.badges.rules import RULES_BY_TYPE, BadgeContext
from leettrack.features.badges.service import badge_evaluator
from leettrack.features.progress.service import progress_service


def _ctx(**overrides):
    base = dict(student_id="s1", stats=stats(), daily_increment=0, streak=0, as_of=TODAY)
    base.update(overrides)
    return BadgeContext(**base)


@pytest.mark.parametrize(
    "badge_type, hit, miss",
    [
        ("century_coder", _ctx(stats=stats(100)), _ctx(stats=stats(99))),
        ("problem_hunter", _ctx(stats=stats(500)), _ctx(stats=stats(499))),
        ("hard_mode", _ctx(stats=stats(hard=50)), _ctx(stats=stats(hard=49))),
        ("perfectionist", _ctx(stats=stats(acceptance=90.0)), _ctx(stats=stats(acceptance=89.9))),
        ("streak_master", _ctx(streak=7), _ctx(streak=6)),
        ("consistency_champ", _ctx(active_days=30), _ctx(active_days=29)),
        ("weekly_topper", _ctx(weekly_rank=1, weekly_increment=3), _ctx(weekly_rank=1, weekly_increment=0)),
        ("comeback_coder", _ctx(daily_increment=10), _ctx(daily_increment=9)),
    ],
)
def test_each_rule_threshold(badge_type, hit, miss):
    rule = RULES_BY_TYPE[badge_type]
    assert rule.applies(hit)
    assert not rule.applies(miss)


def test_only_comeback_coder_is_repeatable():
    assert [r.badge_type for r in RULES_BY_TYPE.values() if r.repeatable] == ["comeback_coder"]


def test_one_time_badge_granted_once(make_student):
    s = make_student("alice")
    first = badge_evaluator.evaluate_badges(s.id, stats(150), 0, 0, as_of=TODAY)
    second = badge_evaluator.evaluate_badges(s.id, stats(160), 0, 0, as_of=TODAY + timedelta(days=1))
    assert [b.badge_type for b in first] == ["century_coder"]
    assert second == []
    assert len(badge_repository.list_badges(s.id)) == 1


def test_repeatable_badge_granted_every_time_by_default(make_student):
    s = make_student("bob")
    badge_evaluator.evaluate_badges(s.id, stats(20), 12, 0, as_of=TODAY)
    badge_evaluator.evaluate_badges(s.id, stats(20), 12, 0, as_of=TODAY)
    types = [b.badge_type for b in badge_repository.list_badges(s.id)]
    assert types == ["comeback_coder", "comeback_coder"]


def test_repeatable_badge_capped_per_day_when_enabled(make_student, monkeypatch):
    monkeypatch.setattr(get_settings(), "cap_repeatable_badges_per_day", True)
    s = make_student("carol")
    badge_evaluator.evaluate_badges(s.id, stats(20), 12, 0, as_of=TODAY)
    again = badge_evaluator.evaluate_badges(s.id, stats(20), 12, 0, as_of=TODAY)
    next_day = badge_evaluator.evaluate_badges(s.id, stats(35), 15, 0, as_of=TODAY + timedelta(days=1))
    assert again == []
    assert [b.badge_type for b in next_day] == ["comeback_coder"]


def test_reconcile_grants_weekly_topper(make_student):
    leader = make_student("leader")
    other = make_student("other")
    progress_service.reconcile_snapshot(other.id, stats(3), TODAY)
    outcome = progress_service.reconcile_snapshot(leader.id, stats(8), TODAY)
    assert "weekly_topper" in [b.badge_type for b in outcome.badges]


def test_badge_overview_counts_holders(make_student):
    s = make_student("dana")
    badge_evaluator.evaluate_badges(s.id, stats(120), 11, 0, as_of=TODAY)
    badge_evaluator.evaluate_badges(s.id, stats(135), 15, 0, as_of=TODAY + timedelta(days=1))
    overview = {o.badge_type: o for o in badge_evaluator.badge_overview()}

    assert overview["century_coder"].total_awarded == 1
    assert overview["comeback_coder"].total_awarded == 2
    assert overview["comeback_coder"].holders[0].handle == "dana"
    assert overview["comeback_coder"].holders[0].times_earned == 2
    assert overview["hard_mode"].holders == []
