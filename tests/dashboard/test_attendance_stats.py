from __future__ import annotations

from datetime import date

import pytest

from src.edutrack.edutrack.core.exceptions import ValidationError
from src.edutrack.edutrack.dashboard.service import AttendanceStatsService, percent, week_start


@pytest.fixture
def stats(service) -> AttendanceStatsService:
    return AttendanceStatsService(service)


def test_percent_rounds_half_up():
    assert percent(0, 0) == 0
    assert percent(1, 2) == 50
    assert percent(1, 8) == 13
    assert percent(2, 3) == 67
    assert percent(1, 3) == 33


def test_week_starts_on_sunday():
    assert week_start(date(2024, 3, 10)) == date(2024, 3, 10)
    assert week_start(date(2024, 3, 13)) == date(2024, 3, 10)
    assert week_start(date(2024, 3, 16)) == date(2024, 3, 10)


def test_day_rate_is_scoped(service, stats, admin, north):
    service.mark(
        admin,
        date="2024-03-10",
        records=[
            {"studentId": "s1", "status": "present"},
            {"studentId": "s2", "status": "absent"},
            {"studentId": "s3", "status": "present"},
        ],
    )

    assert stats.day(admin, date="2024-03-10").to_dict() == {
        "date": "2024-03-10",
        "presentCount": 2,
        "absentCount": 1,
        "totalMarked": 3,
        "attendanceRate": 67,
    }
    assert stats.day(north, date="2024-03-10").to_dict()["attendanceRate"] == 50


def test_weekly_trends_bucket_by_sunday(service, stats, admin):
    service.mark(admin, date="2024-03-09", records=[{"studentId": "s1", "status": "absent"}])
    service.mark(admin, date="2024-03-10", records=[{"studentId": "s1", "status": "present"}])
    service.mark(admin, date="2024-03-12", records=[{"studentId": "s3", "status": "present"}])

    trends = stats.weekly_trends(admin, start="2024-03-08", end="2024-03-12")

    assert trends == [
        {"week": "2024-03-03", "present": 0, "absent": 1, "rate": 0},
        {"week": "2024-03-10", "present": 2, "absent": 0, "rate": 100},
    ]


def test_trend_range_must_be_ordered(stats, admin):
    with pytest.raises(ValidationError):
        stats.weekly_trends(admin, start="2024-03-12", end="2024-03-01")
