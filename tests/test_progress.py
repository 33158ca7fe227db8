from datetime import date, timedelta

import pytest

from conftest import TODAY, stats
from leettrack.common.errors import NotFound
from leettrack.common.utils import week_bounds
from leettrack.features.progress.repository import progress_repository
from leettrack.features.progress.service import progress_service


def test_week_bounds_start_on_sunday():
    start, end = week_bounds(TODAY)
    assert start == date(2024, 3, 10)
    assert start.weekday() == 6
    assert end == date(2024, 3, 16)
    # A Sunday is the first day of its own week
    assert week_bounds(date(2024, 3, 17))[0] == date(2024, 3, 17)


def test_first_snapshot_increment_is_total(make_student):
    s = make_student("alice")
    entry = progress_service.record_daily_snapshot(s.id, stats(10), TODAY)
    assert entry.daily_increment == 10
    assert entry.total_solved == 10


def test_increment_against_previous_day_and_weekly_bucket(make_student):
    s = make_student("bob")
    day1 = TODAY - timedelta(days=1)
    progress_service.reconcile_snapshot(s.id, stats(50), day1)
    outcome = progress_service.reconcile_snapshot(s.id, stats(55), TODAY)

    assert outcome.daily.daily_increment == 5
    assert outcome.weekly.weekly_increment == 55
    assert outcome.weekly.total_problems == 55
    assert outcome.weekly.week_start == date(2024, 3, 10)


def test_same_day_resync_is_idempotent(make_student):
    s = make_student("carol")
    progress_service.reconcile_snapshot(s.id, stats(100), TODAY - timedelta(days=1))
    first = progress_service.record_daily_snapshot(s.id, stats(107), TODAY)
    second = progress_service.record_daily_snapshot(s.id, stats(107), TODAY)

    assert first.daily_increment == second.daily_increment == 7
    assert first.id == second.id
    assert len(progress_repository.list_daily_progress(s.id, limit=10)) == 2


def test_later_snapshot_same_day_recomputes_from_prior_day(make_student):
    s = make_student("dave")
    progress_service.reconcile_snapshot(s.id, stats(20), TODAY - timedelta(days=1))
    progress_service.reconcile_snapshot(s.id, stats(22), TODAY)
    entry = progress_service.record_daily_snapshot(s.id, stats(30), TODAY)
    assert entry.daily_increment == 10


def test_decrease_is_stored_as_negative_increment(make_student):
    s = make_student("erin")
    progress_service.reconcile_snapshot(s.id, stats(100), TODAY - timedelta(days=1))
    entry = progress_service.record_daily_snapshot(s.id, stats(95), TODAY)
    assert entry.daily_increment == -5


def test_gap_uses_most_recent_prior_entry(make_student):
    s = make_student("frank")
    progress_service.reconcile_snapshot(s.id, stats(40), TODAY - timedelta(days=4))
    entry = progress_service.record_daily_snapshot(s.id, stats(46), TODAY)
    assert entry.daily_increment == 6


def test_unknown_student_raises_not_found():
    with pytest.raises(NotFound):
        progress_service.record_daily_snapshot("missing", stats(1), TODAY)
    with pytest.raises(NotFound):
        progress_service.update_weekly_trend("missing", 1, TODAY)


def test_weekly_baseline_is_previous_week_total(make_student):
    s = make_student("gina")
    last_week = TODAY - timedelta(days=7)
    progress_service.reconcile_snapshot(s.id, stats(80), last_week)
    progress_service.reconcile_snapshot(s.id, stats(85), TODAY - timedelta(days=2))
    trend = progress_service.reconcile_snapshot(s.id, stats(92), TODAY).weekly

    assert trend.weekly_increment == 12
    assert len(progress_service.list_weekly_trends(s.id)) == 2


def test_weekly_resync_updates_in_place(make_student):
    s = make_student("hank")
    a = progress_service.update_weekly_trend(s.id, 30, TODAY - timedelta(days=3))
    b = progress_service.update_weekly_trend(s.id, 35, TODAY)
    assert a.id == b.id
    assert b.weekly_increment == 35
    assert len(progress_repository.list_weekly_trends(s.id)) == 1


def test_weekly_increments_sum_to_total_change(make_student):
    s = make_student("ivy")
    totals = [10, 18, 18, 31]
    start = TODAY - timedelta(weeks=len(totals) - 1)
    for i, total in enumerate(totals):
        progress_service.update_weekly_trend(s.id, total, start + timedelta(weeks=i))
    trends = progress_service.list_weekly_trends(s.id)
    assert sum(t.weekly_increment for t in trends) == totals[-1]


def test_daily_increments_within_week_sum_to_weekly_increment(make_student):
    s = make_student("joy")
    week_start, _ = week_bounds(TODAY)
    progress_service.reconcile_snapshot(s.id, stats(50), week_start - timedelta(days=2))
    for i, total in enumerate([52, 55, 55, 60, 61, 70, 72]):
        progress_service.reconcile_snapshot(s.id, stats(total), week_start + timedelta(days=i))

    this_week = [d for d in progress_service.list_daily_progress(s.id) if d.date >= week_start]
    assert len(this_week) == 7
    trend = progress_service.get_week_trend(s.id, TODAY)
    assert trend.weekly_increment == 22
    assert sum(d.daily_increment for d in this_week) == trend.weekly_increment


def test_rank_week_orders_by_increment_with_stable_ties(make_student):
    a = make_student("ann")
    b = make_student("ben")
    c = make_student("cat")
    progress_service.update_weekly_trend(a.id, 5, TODAY)
    progress_service.update_weekly_trend(b.id, 9, TODAY)
    progress_service.update_weekly_trend(c.id, 5, TODAY)

    week_start, _ = week_bounds(TODAY)
    ranked = progress_service.rank_week(week_start)
    assert [(rank, e.student_id) for rank, e in ranked] == [(1, b.id), (2, a.id), (3, c.id)]
    assert progress_service.week_rank_of(c.id, TODAY) == 3
    assert progress_service.week_rank_of("nobody", TODAY) == 0


def test_latest_daily_before_excludes_the_given_day(make_student):
    s = make_student("kim")
    progress_service.reconcile_snapshot(s.id, stats(12), TODAY - timedelta(days=2))
    progress_service.reconcile_snapshot(s.id, stats(20), TODAY)
    assert progress_service.latest_daily_before(s.id, TODAY).total_solved == 12
    assert progress_service.latest_daily_before(s.id, TODAY - timedelta(days=2)) is None
