from datetime import timedelta

import pytest

from conftest import TODAY, stats
from leettrack.common.errors import NotFound
from leettrack.features.badges.service import badge_evaluator
from leettrack.features.dashboard.service import DashboardService, dashboard_service, status_for
from leettrack.features.progress.service import progress_service


def _seed(make_student, handle, last_week_total, this_week_total, batch=None):
    s = make_student(handle, batch=batch)
    progress_service.reconcile_snapshot(s.id, stats(last_week_total), TODAY - timedelta(days=7))
    progress_service.reconcile_snapshot(s.id, stats(this_week_total), TODAY)
    return s


@pytest.mark.parametrize("weekly, expected", [(15, "Excellent"), (14, "Active"), (5, "Active"), (4, "Underperforming"), (0, "Underperforming")])
def test_status_thresholds(weekly, expected):
    assert status_for(weekly) == expected


def test_empty_cohort_dashboard():
    data = dashboard_service.assemble_admin_dashboard(today=TODAY)
    assert data.total_students == 0
    assert data.avg_problems == 0
    assert data.students == []
    assert data.leaderboard == []


def test_admin_dashboard_aggregates(make_student):
    _seed(make_student, "alice", 100, 120)
    _seed(make_student, "bob", 50, 56)
    _seed(make_student, "carl", 30, 30)
    make_student("dina")

    data = dashboard_service.assemble_admin_dashboard(today=TODAY)
    by_handle = {row.student.handle: row for row in data.students}

    assert data.total_students == 4
    assert data.active_students == 2
    assert data.underperforming == 2
    assert data.avg_problems == round((120 + 56 + 30 + 0) / 4, 2)
    assert by_handle["alice"].status == "Excellent"
    assert by_handle["bob"].status == "Active"
    assert by_handle["dina"].stats.total_solved == 0
    assert [e.student.handle for e in data.leaderboard] == ["alice", "bob", "carl", "dina"]
    assert [e.rank for e in data.leaderboard] == [1, 2, 3, 4]


def test_per_student_failure_is_zeroed(make_student, monkeypatch):
    _seed(make_student, "alice", 10, 30)
    broken = _seed(make_student, "bob", 10, 40)
    real_lookup = progress_service.latest_daily_progress

    def flaky(student_id):
        if student_id == broken.id:
            raise RuntimeError("boom")
        return real_lookup(student_id)

    monkeypatch.setattr(progress_service, "latest_daily_progress", flaky)
    data = dashboard_service.assemble_admin_dashboard(today=TODAY)
    by_handle = {row.student.handle: row for row in data.students}

    assert data.total_students == 2
    assert by_handle["bob"].stats.total_solved == 0
    assert by_handle["bob"].weekly_progress == 0
    assert by_handle["alice"].weekly_progress == 20


def test_leaderboard_limit_and_batch(make_student, monkeypatch):
    _seed(make_student, "a", 0, 3, batch="2027")
    _seed(make_student, "b", 0, 9, batch="2028")
    _seed(make_student, "c", 0, 3, batch="2027")

    top = dashboard_service.leaderboard(limit=2, today=TODAY)
    assert [(e.rank, e.student.handle, e.weekly_score) for e in top] == [(1, "b", 9), (2, "a", 3)]

    batch = dashboard_service.leaderboard(batch="2027", today=TODAY)
    assert [e.student.handle for e in batch] == ["a", "c"]

    data = dashboard_service.assemble_batch_dashboard("2028", today=TODAY)
    assert data.total_students == 1


def test_leaderboard_default_size_from_settings(make_student, monkeypatch):
    for i in range(4):
        make_student(f"s{i}")
    service = DashboardService()
    monkeypatch.setattr(service.settings, "leaderboard_size", 3)
    assert len(service.leaderboard(today=TODAY)) == 3


def test_student_dashboard(make_student):
    s = make_student("erin")
    for i, total in enumerate([10, 16, 22]):
        progress_service.reconcile_snapshot(s.id, stats(total), TODAY - timedelta(days=2 - i))

    data = dashboard_service.assemble_student_dashboard("erin", today=TODAY)
    assert data.stats.total_solved == 22
    assert data.current_streak == 3
    assert data.longest_streak == 3
    assert data.weekly_rank == 1
    assert [d.count for d in data.daily_activity] == [10, 6, 6]
    assert data.daily_activity[0].day < data.daily_activity[-1].day
    assert len(data.weekly_progress) == 1
    assert {b.badge_type for b in data.badges} == {b.badge_type for b in badge_evaluator.list_badges(s.id)}

    with pytest.raises(NotFound):
        dashboard_service.assemble_student_dashboard("nobody", today=TODAY)


def test_analytics_compares_against_last_week(make_student):
    _seed(make_student, "up", 10, 25)
    _seed(make_student, "flat", 7, 7)
    _seed(make_student, "down", 40, 38)

    data = dashboard_service.analytics(today=TODAY)
    assert data.summary.total_students == 3
    assert (data.summary.improved, data.summary.declined, data.summary.same) == (1, 1, 1)
    assert data.summary.average_improvement == round((15 + 0 - 2) / 3, 2)
    assert [i.student.handle for i in data.top_improvers] == ["up"]
    assert data.top_students[0].student.handle == "down"


def test_export_csv(make_student):
    _seed(make_student, "alice", 5, 25)
    text = dashboard_service.export_csv(today=TODAY)
    lines = text.strip().splitlines()
    assert lines[0] == "Name,LeetCode Username,Total Solved,Weekly Progress,Streak,Status"
    assert lines[1] == "Alice,alice,25,20,1,Excellent"
    assert dashboard_service.export_rows(today=TODAY)[0].weekly_progress == 20
