from datetime import date, timedelta

from conftest import TODAY
from leettrack.features.imports.csv_parser import parse_number, parse_numbers, read_rows
from leettrack.features.imports.repository import weekly_progress_repository
from leettrack.features.imports.service import import_service, round_half_up, weekly_fields
from leettrack.features.progress.repository import progress_repository
from leettrack.features.students.repository import student_repository


def test_parse_number_coerces_noise_to_zero():
    assert parse_numbers(["", "#VALUE!", "15"]) == [0, 0, 15]
    assert parse_number("Went home") == 0
    assert parse_number("Leave") == 0
    assert parse_number(None) == 0


def test_parse_number_strips_decorations():
    assert parse_number('"1,234"') == 1234
    assert parse_number("~40") == 40
    assert parse_number("55+") == 55
    assert parse_number(" 12 ") == 12
    assert parse_number("-3") == -3


def test_parse_number_reads_only_the_leading_number():
    assert parse_number("20 + 5") == 20
    assert parse_number("10 15") == 10
    assert parse_number("1,5") == 1
    assert parse_number("12,345,678") == 12345678
    assert parse_number("~ 30 approx") == 30


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(-2.5) == -2


def test_weekly_fields_with_and_without_current_week():
    without = weekly_fields([10, 14, 20, 25], None)
    assert without["week2_progress"] == 4
    assert without["week3_progress"] == 6
    assert without["week4_progress"] == 5
    assert without["last_week_to_current_increment"] == 0
    assert without["total_score"] == 69
    assert without["average_weekly_growth"] == 5

    with_current = weekly_fields([10, 14, 20, 25], 33)
    assert with_current["last_week_to_current_increment"] == 8
    assert with_current["total_score"] == 102
    assert with_current["average_weekly_growth"] == round_half_up((4 + 6 + 5 + 8) / 4)


def test_import_weekly_snapshot_counts_and_skips(make_student):
    make_student("alice")
    rows = [
        ["Alice", "alice", "https://leetcode.com/u/alice/", "10", "#VALUE!", "Went home", "15"],
        ["Blank", "", "", "1", "2", "3", "4"],
        ["Ghost", "ghost", "", "1", "2", "3", "4"],
        ["Short", "alice", "link"],
    ]
    result = import_service.import_weekly_snapshot(rows)

    assert result.imported == 1
    assert result.updated == 0
    assert result.skipped == 3
    assert len(result.errors) == 2
    assert any("ghost" in e for e in result.errors)

    row = weekly_progress_repository.get_for_student(student_repository.get_student_by_handle("alice").id)
    assert (row.week1_score, row.week2_score, row.week3_score, row.week4_score) == (10, 0, 0, 15)
    assert row.week2_progress == -10
    assert row.week4_progress == 15


def test_reimport_is_idempotent(make_student):
    make_student("bob")
    text = "Name,Handle,ProfileLink,Week1,Week2,Week3,Week4\nBob,bob,,5,9,12,20\n"
    first = import_service.import_weekly_snapshot_csv(text)
    before = import_service.student_weekly_progress("bob")
    second = import_service.import_weekly_snapshot_csv(text)
    after = import_service.student_weekly_progress("bob")

    assert (first.imported, first.updated) == (1, 0)
    assert (second.imported, second.updated) == (0, 1)
    assert before.weekly_data == after.weekly_data
    assert before.progress_increments == after.progress_increments
    assert before.summary == after.summary


def test_current_week_column(make_student):
    make_student("carl")
    import_service.import_weekly_snapshot([["Carl", "carl", "", "1", "2", "3", "4", "9"]])
    view = import_service.student_weekly_progress("carl")
    assert view.weekly_data.current_week == 9
    assert view.progress_increments.last_week_to_current_increment == 5


def test_backfill_trends_maps_weeks_onto_recent_sundays(make_student):
    s = make_student("dora")
    import_service.import_weekly_snapshot(
        [["Dora", "dora", "", "10", "14", "20", "25"]], backfill_trends=True, as_of_date=TODAY
    )
    trends = list(reversed(progress_repository.list_weekly_trends(s.id)))

    assert [t.week_start for t in trends] == [date(2024, 3, 10) - timedelta(weeks=k) for k in (3, 2, 1, 0)]
    assert [t.weekly_increment for t in trends] == [10, 4, 6, 5]
    assert trends[-1].total_problems == 25


def test_read_rows_skips_header_and_blank_lines():
    rows = read_rows('Name,Handle\n\n"Doe, Jane",jane\n')
    assert rows == [["Doe, Jane", "jane"]]


def test_import_roster_creates_and_updates(make_student):
    make_student("erin", batch="2027")
    result = import_service.import_roster(
        [
            ["Erin E", "erin", "", "2028"],
            ["Finn", "finn", "https://leetcode.com/u/finn/"],
            ["Nobody", ""],
            ["x"],
        ]
    )
    assert (result.created, result.updated, result.skipped) == (1, 1, 2)
    assert len(result.errors) == 1
    erin = student_repository.get_student_by_handle("erin")
    assert erin.name == "Erin E"
    assert erin.batch == "2028"
    assert student_repository.get_student_by_handle("finn").profile_link == "https://leetcode.com/u/finn/"
