from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from ..attendance.service import AttendanceService
from ..common.datetime_utils import format_iso_date, now_utc, parse_iso_date, today_utc
from ..common.validators import require_iso_date
from ..core.constants import DEFAULT_TREND_DAYS, MAX_TREND_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..users.model import CurrentUser


def percent(part: int, total: int) -> int:
    """Whole percentage rounded half up; 0 when total is 0."""
    if total <= 0:
        return 0
    return (part * 200 + total) // (total * 2)


def week_start(day: date) -> date:
    """Sunday that opens the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


@dataclass(frozen=True)
class DayAttendance:
    date: str
    present: int
    absent: int

    @property
    def total(self) -> int:
        return self.present + self.absent

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "presentCount": self.present,
            "absentCount": self.absent,
            "totalMarked": self.total,
            "attendanceRate": percent(self.present, self.total),
        }


class AttendanceStatsService:
    """Attendance numbers for the dashboard, read from the by-date view."""

    def __init__(self, attendance: AttendanceService):
        self._attendance = attendance

    def day(self, user: CurrentUser, *, date: Optional[str] = None) -> DayAttendance:
        date = require_iso_date(date) if date else today_utc()
        present = absent = 0
        for entry in self._attendance.by_date_entries(user, date):
            if entry.status == AttendanceStatus.PRESENT:
                present += 1
            else:
                absent += 1
        return DayAttendance(date=date, present=present, absent=absent)

    def weekly_trends(
        self,
        user: CurrentUser,
        *,
        start: Optional[str] = None,
        end: Optional[str] = None,
    ) -> list[dict]:
        end_d = parse_iso_date(require_iso_date(end)) if end else now_utc().date()
        start_d = (
            parse_iso_date(require_iso_date(start)) if start else end_d - timedelta(days=DEFAULT_TREND_DAYS)
        )
        if end_d < start_d:
            raise ValidationError("endDate must not be before startDate")
        if (end_d - start_d).days > MAX_TREND_DAYS:
            raise ValidationError(f"Date range must not exceed {MAX_TREND_DAYS} days")

        weeks: dict[str, dict] = {}
        current = start_d
        while current <= end_d:
            key = format_iso_date(week_start(current))
            bucket = weeks.setdefault(key, {"present": 0, "absent": 0})
            day = self.day(user, date=format_iso_date(current))
            bucket["present"] += day.present
            bucket["absent"] += day.absent
            current += timedelta(days=1)

        return [
            {
                "week": week,
                "present": data["present"],
                "absent": data["absent"],
                "rate": percent(data["present"], data["present"] + data["absent"]),
            }
            for week, data in sorted(weeks.items())
        ]
