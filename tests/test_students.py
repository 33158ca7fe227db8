import pytest

from conftest import TODAY, stats
from leettrack.common.errors import Inconsistent, NotFound
from leettrack.features.badges.repository import badge_repository
from leettrack.features.imports.repository import weekly_progress_repository
from leettrack.features.imports.service import import_service
from leettrack.features.progress.repository import progress_repository
from leettrack.features.progress.service import progress_service
from leettrack.features.students.repository import student_repository
from leettrack.features.students.schemas import StudentCreate, StudentUpdate
from leettrack.features.students.service import student_service


def test_onboard_fills_profile_link_and_rejects_duplicates():
    s = student_service.onboard(StudentCreate(name="Alice", handle=" alice "))
    assert s.handle == "alice"
    assert s.profile_link == "https://leetcode.com/u/alice/"
    with pytest.raises(Inconsistent):
        student_service.onboard(StudentCreate(name="Again", handle="alice"))


def test_update_profile_metadata(make_student):
    make_student("bob")
    updated = student_service.update_profile("bob", StudentUpdate(batch="2028"))
    assert updated.batch == "2028"
    assert updated.handle == "bob"


def test_delete_cascades_to_child_rows(make_student):
    s = make_student("carol")
    progress_service.reconcile_snapshot(s.id, stats(150), TODAY)
    import_service.import_weekly_snapshot([["Carol", "carol", "", "1", "2", "3", "4"]])
    assert badge_repository.list_badges(s.id)

    student_service.delete_by_handle("carol")

    assert student_repository.get_student(s.id) is None
    assert progress_repository.list_daily_progress(s.id) == []
    assert progress_repository.list_weekly_trends(s.id) == []
    assert badge_repository.list_badges(s.id) == []
    assert weekly_progress_repository.get_for_student(s.id) is None
    with pytest.raises(NotFound):
        student_service.delete_by_handle("carol")


def test_bulk_delete_counts_unknown_as_failed(make_student):
    make_student("a")
    make_student("b")
    assert student_service.bulk_delete(["a", "b", "zzz"]) == (2, 1)
    assert student_service.list_students() == []


def test_remove_students_with_zero_questions(make_student):
    active = make_student("active")
    zero = make_student("zero")
    make_student("never")
    progress_service.reconcile_snapshot(active.id, stats(5), TODAY)
    progress_service.reconcile_snapshot(zero.id, stats(0), TODAY)

    assert {s.handle for s in student_service.students_with_zero_questions()} == {"zero", "never"}
    removed = student_service.remove_students_with_zero_questions()
    assert {s.handle for s in removed} == {"zero", "never"}
    assert [s.handle for s in student_service.list_students()] == ["active"]
