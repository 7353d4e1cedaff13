from __future__ import annotations

from dataclasses import replace

import pytest

from src.edutrack.edutrack.attendance.reconciler import AttendanceReconciler
from src.edutrack.edutrack.core.enums import AttendanceStatus
from src.edutrack.edutrack.core.exceptions import AuthorizationError


@pytest.fixture
def reconciler(attendance_repo, students_repo) -> AttendanceReconciler:
    return AttendanceReconciler(attendance_repo, students_repo)


def test_consistent_views_need_no_repair(service, reconciler, admin):
    service.mark(admin, date="2024-03-10", records=[{"studentId": "s1", "status": "present"}])

    report = reconciler.reconcile(date="2024-03-10")

    assert report.checked == 1
    assert report.repaired == []


def test_partial_write_is_copied_into_missing_view(service, reconciler, attendance_repo, admin):
    attendance_repo.fail_by_student_for.add("s1")
    service.mark(admin, date="2024-03-10", records=[{"studentId": "s1", "status": "present"}])
    attendance_repo.fail_by_student_for.clear()

    report = reconciler.reconcile(date="2024-03-10")

    assert report.repaired == ["s1"]
    by_date = attendance_repo.by_date[("2024-03-10_center-north", "s1")]
    by_student = attendance_repo.by_student[("s1", "2024-03-10")]
    assert (by_student.status, by_student.marked_at, by_student.marked_by, by_student.center_id) == (
        by_date.status,
        by_date.marked_at,
        by_date.marked_by,
        by_date.center_id,
    )
    assert reconciler.reconcile(date="2024-03-10").repaired == []


def test_later_mark_wins_when_views_disagree(service, reconciler, attendance_repo, admin):
    service.mark(admin, date="2024-03-10", records=[{"studentId": "s3", "status": "present"}])
    key = ("s3", "2024-03-10")
    attendance_repo.by_student[key] = replace(
        attendance_repo.by_student[key],
        status=AttendanceStatus.ABSENT,
        marked_by="u-south",
        marked_at="2024-03-10T23:59:59.000Z",
    )

    reconciler.reconcile(date="2024-03-10")

    by_date = attendance_repo.by_date[("2024-03-10_center-south", "s3")]
    assert by_date.status == AttendanceStatus.ABSENT
    assert by_date.marked_by == "u-south"
    assert by_date.student_name == "Carlos Mendez"


def test_by_student_only_row_gets_name_from_student_lookup(reconciler, attendance_repo, service, admin):
    service.mark(admin, date="2024-03-10", records=[{"studentId": "s2", "status": "absent"}])
    attendance_repo.by_date.clear()

    reconciler.reconcile(date="2024-03-10")

    assert attendance_repo.by_date[("2024-03-10_center-north", "s2")].student_name == "Bao Tran"


def test_dry_run_reports_without_writing(service, reconciler, attendance_repo, admin):
    attendance_repo.fail_by_student_for.add("s1")
    service.mark(admin, date="2024-03-10", records=[{"studentId": "s1", "status": "present"}])
    attendance_repo.fail_by_student_for.clear()

    report = reconciler.reconcile(date="2024-03-10", dry_run=True)

    assert report.repaired == ["s1"]
    assert attendance_repo.by_student == {}


def test_center_filter_limits_scan(service, reconciler, attendance_repo, admin):
    service.mark(
        admin,
        date="2024-03-10",
        records=[{"studentId": "s1", "status": "present"}, {"studentId": "s3", "status": "present"}],
    )
    attendance_repo.by_student.clear()

    report = reconciler.reconcile(date="2024-03-10", center_id="center-south")

    assert report.repaired == ["s3"]
    assert list(attendance_repo.by_student) == [("s3", "2024-03-10")]


def test_only_admins_may_reconcile(reconciler, north):
    with pytest.raises(AuthorizationError):
        reconciler.reconcile_for(north, date="2024-03-10")


def test_by_date_rows_in_two_centers_settle_on_the_student_center(
    service, reconciler, attendance_repo, admin, caplog
):
    service.mark(admin, date="2024-03-10", records=[{"studentId": "s1", "status": "present"}])
    current = attendance_repo.by_date[("2024-03-10_center-north", "s1")]
    attendance_repo.upsert_by_date(
        replace(current, center_id="center-south", status=AttendanceStatus.ABSENT, marked_at="2024-03-10T23:00:00.000Z")
    )

    with caplog.at_level("WARNING"):
        first = reconciler.reconcile(date="2024-03-10")
    second = reconciler.reconcile(date="2024-03-10")

    assert first.repaired == []
    assert second.repaired == []
    assert attendance_repo.by_student[("s1", "2024-03-10")].status == AttendanceStatus.PRESENT
    assert "center-north, center-south" in caplog.text


def test_by_date_rows_in_two_centers_without_by_student_keep_latest(service, reconciler, attendance_repo, admin):
    service.mark(admin, date="2024-03-10", records=[{"studentId": "s1", "status": "present"}])
    current = attendance_repo.by_date[("2024-03-10_center-north", "s1")]
    attendance_repo.upsert_by_date(
        replace(current, center_id="center-south", status=AttendanceStatus.ABSENT, marked_at="2024-03-10T23:00:00.000Z")
    )
    attendance_repo.by_student.clear()

    reconciler.reconcile(date="2024-03-10")

    copied = attendance_repo.by_student[("s1", "2024-03-10")]
    assert (copied.center_id, copied.status) == ("center-south", AttendanceStatus.ABSENT)
    assert reconciler.reconcile(date="2024-03-10").repaired == []
