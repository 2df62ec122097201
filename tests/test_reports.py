from datetime import date

import pytest

from academy.extensions import db
from academy.models import AttendanceRecord, AttendanceStatus, ScheduleDays, UserRole
from academy.services.reports import (
    attendance_percentage, batch_day_summary, faculty_day_report, student_range_report,
)

WEDNESDAY = date(2024, 1, 3)


@pytest.mark.parametrize("present, total, expected", [
    (0, 0, 0),
    (3, 4, 75),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),   # 12.5 rounds up
    (5, 5, 100),
])
def test_attendance_percentage(present, total, expected):
    assert attendance_percentage(present, total) == expected


def _mark(batch, student, day, status, marker=None):
    db.session.add(AttendanceRecord(
        student_id=student.id, batch_id=batch.id, date=day, status=status,
        marked_by_id=marker.id if marker else None,
    ))
    db.session.commit()


@pytest.fixture
def morning_a(center, faculty, make_batch, make_student):
    batch = make_batch(center, "Morning A", ScheduleDays.MWF, faculty=faculty)
    aarav = make_student(center, "Aarav Shah", "GN-2024-001", batch)
    diya = make_student(center, "Diya Patel", "GN-2024-002", batch)
    return batch, aarav, diya


def test_unmarked_batch_summary(morning_a):
    batch, _, _ = morning_a
    summary = batch_day_summary(batch, WEDNESDAY)
    assert summary["total_students"] == 2
    assert summary["present_count"] == 0
    assert summary["attendance_marked"] is False
    assert summary["attendance_percentage"] == 0


def test_center_report_after_marking_wednesday(client, auth_header, admin, center, morning_a):
    batch, aarav, diya = morning_a
    _mark(batch, aarav, WEDNESDAY, AttendanceStatus.Present)
    _mark(batch, diya, WEDNESDAY, AttendanceStatus.Absent)

    response = client.get(f"/reports/center/{center.id}?date=2024-01-03", headers=auth_header(admin))
    assert response.status_code == 200
    body = response.get_json()
    assert body["error"] is None

    report = body["data"]
    assert report["day_type"] == "MWF"
    [row] = report["batches"]
    assert row["batch_name"] == "Morning A"
    assert row["total_students"] == 2
    assert row["present_count"] == 1
    assert row["absent_count"] == 1
    assert row["attendance_marked"] is True
    assert row["attendance_percentage"] == 50
    assert report["totals"]["percentage"] == 50


def test_center_report_skips_batches_not_meeting_that_day(client, auth_header, admin, center, morning_a):
    response = client.get(f"/reports/center/{center.id}?date=2024-01-04", headers=auth_header(admin))
    report = response.get_json()["data"]
    assert report["day_type"] == "TTS"
    assert report["batches"] == []
    assert report["totals"]["students"] == 0


def test_sunday_reports_are_empty(client, auth_header, admin, center, morning_a):
    response = client.get(f"/reports/center/{center.id}?date=2024-01-07", headers=auth_header(admin))
    report = response.get_json()["data"]
    assert report["day_type"] is None
    assert report["batches"] == []
    assert report["totals"]["percentage"] == 0

    response = client.get("/reports/faculty?date=2024-01-07", headers=auth_header(admin))
    assert response.get_json()["data"]["faculty"] == []


def test_manager_cannot_read_another_centers_report(client, auth_header, make_center, manager):
    other = make_center("Delhi")
    response = client.get(f"/reports/center/{other.id}?date=2024-01-03", headers=auth_header(manager))
    assert response.status_code == 403
    assert response.get_json()["data"] is None


def test_invalid_report_date(client, auth_header, admin, center):
    response = client.get(f"/reports/center/{center.id}?date=2024-13-40", headers=auth_header(admin))
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid date format, use YYYY-MM-DD"


def test_faculty_report_groups_batches(app, admin, center, faculty, make_batch, make_student, scope_for, morning_a):
    batch, aarav, diya = morning_a
    make_batch(center, "Evening B", ScheduleDays.TTS, faculty=faculty)
    _mark(batch, aarav, WEDNESDAY, AttendanceStatus.Present)

    [entry] = faculty_day_report(scope_for(admin), WEDNESDAY)
    assert entry["full_name"] == "Asha Verma"
    assert entry["total_batches"] == 1
    assert entry["total_students"] == 2
    assert entry["total_present"] == 1


def test_student_range_report(app, admin, scope_for, morning_a):
    batch, aarav, diya = morning_a
    _mark(batch, aarav, date(2024, 1, 1), AttendanceStatus.Present)
    _mark(batch, aarav, WEDNESDAY, AttendanceStatus.Present)
    _mark(batch, aarav, date(2024, 1, 5), AttendanceStatus.Absent)
    _mark(batch, diya, WEDNESDAY, AttendanceStatus.Absent)

    report = {row["roll_number"]: row for row in student_range_report(scope_for(admin), batch_id=batch.id)}
    assert report["GN-2024-001"]["total_classes"] == 3
    assert report["GN-2024-001"]["percentage"] == 67
    assert report["GN-2024-002"]["present_count"] == 0

    ranged = student_range_report(scope_for(admin), start=WEDNESDAY, end=WEDNESDAY)
    assert [row["total_classes"] for row in ranged] == [1, 1]


def test_student_report_route_validates_range(client, auth_header, admin):
    response = client.get(
        "/reports/students?start_date=2024-02-01&end_date=2024-01-01", headers=auth_header(admin)
    )
    assert response.status_code == 400


def test_faculty_only_sees_own_batches(client, auth_header, center, make_user, make_batch, morning_a):
    other = make_user("ravi@academy.local", UserRole.FACULTY, full_name="Ravi Kumar")
    make_batch(center, "Morning C", ScheduleDays.MWF, faculty=other)

    response = client.get("/reports/batches?date=2024-01-03", headers=auth_header(other))
    names = [row["batch_name"] for row in response.get_json()["data"]["batches"]]
    assert names == ["Morning C"]
