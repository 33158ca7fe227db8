from datetime import timedelta
from types import SimpleNamespace

from conftest import TODAY, stats
from leettrack.features.progress.service import progress_service
from leettrack.features.progress.streaks import (
    count_active_days,
    max_streak_from_entries,
    streak_calculator,
    streak_from_entries,
)


def _entries(increments):
    """Most recent first, ending today."""
    return [SimpleNamespace(date=TODAY - timedelta(days=i), daily_increment=inc) for i, inc in enumerate(increments)]


def test_streak_stops_at_sub_threshold_day():
    assert streak_from_entries(_entries([6, 6, 6, 4]), 5, TODAY) == 3


def test_streak_stops_at_gap():
    entries = _entries([7, 7])
    entries.append(SimpleNamespace(date=TODAY - timedelta(days=3), daily_increment=9))
    assert streak_from_entries(entries, 5, TODAY) == 2


def test_streak_zero_without_todays_entry():
    entries = [SimpleNamespace(date=TODAY - timedelta(days=1 + i), daily_increment=8) for i in range(3)]
    assert streak_from_entries(entries, 5, TODAY) == 0


def test_streak_never_exceeds_entries():
    entries = _entries([5, 5, 5])
    assert streak_from_entries(entries, 5, TODAY) == len(entries)
    assert streak_from_entries([], 5, TODAY) == 0


def test_max_streak_and_active_days():
    entries = _entries([6, 0, 6, 6, 6, 2])
    assert max_streak_from_entries(entries, 5) == 3
    assert count_active_days(entries) == 5


def test_calculate_streak_reads_stored_series(make_student):
    s = make_student("sam")
    totals = [10, 16, 22, 28]
    start = TODAY - timedelta(days=len(totals) - 1)
    for i, total in enumerate(totals):
        progress_service.record_daily_snapshot(s.id, stats(total), start + timedelta(days=i))

    # first day's increment is the whole total, then +6 per day
    assert streak_calculator.calculate_streak(s.id, today=TODAY) == 4
    assert streak_calculator.calculate_streak(s.id, active_day_threshold=7, today=TODAY) == 0
    assert streak_calculator.calculate_streak(s.id, today=TODAY + timedelta(days=1)) == 0


def test_calculate_streak_for_past_anchor_beyond_lookback(make_student, monkeypatch):
    monkeypatch.setattr(streak_calculator.settings, "streak_lookback_days", 3)
    s = make_student("tia")
    start = TODAY - timedelta(days=9)
    for i in range(10):
        progress_service.record_daily_snapshot(s.id, stats(10 + 6 * i), start + timedelta(days=i))

    assert streak_calculator.calculate_streak(s.id, today=TODAY - timedelta(days=6)) == 4
    assert streak_calculator.calculate_streak(s.id, today=TODAY) == 4
