from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..access.policy import can_access_center, scope_for
from ..common.datetime_utils import now_utc, to_iso_timestamp, today_utc
from ..common.validators import require_iso_date
from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from ..users.model import CurrentUser
from .model import AttendanceRecord, ByDateEntry, ByStudentEntry, MarkResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterRow:
    student_id: str
    name: str
    center_id: str
    program_name: str
    attendance_status: Optional[AttendanceStatus]

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "name": self.name,
            "centerId": self.center_id,
            "programName": self.program_name,
            "attendanceStatus": self.attendance_status.value if self.attendance_status else None,
        }


def _parse_status(value: object) -> Optional[AttendanceStatus]:
    try:
        return AttendanceStatus(value)
    except ValueError:
        return None


def _to_record(entry: ByDateEntry) -> AttendanceRecord:
    return AttendanceRecord(
        student_id=entry.student_id,
        student_name=entry.student_name,
        date=entry.date,
        status=entry.status,
        center_id=entry.center_id,
        marked_by=entry.marked_by,
        marked_at=entry.marked_at,
    )


class AttendanceService:
    """Marks attendance into both views and reads either one back."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._students = students
        self._clock = clock

    def mark(self, user: CurrentUser, *, date: object, records: object) -> MarkResult:
        """Batch-mark one date. Per-record failures never abort the batch."""

        if not date or not isinstance(records, list) or not records:
            raise ValidationError("Date and attendance records are required")
        date = require_iso_date(date)

        saved: list[AttendanceRecord] = []
        errors: list[str] = []

        for item in records:
            item = item if isinstance(item, dict) else {}
            student_id = item.get("studentId")
            try:
                status = _parse_status(item.get("status"))
                if status is None:
                    errors.append(f"Invalid status for student {student_id}")
                    continue

                student = self._students.get_by_id(str(student_id)) if student_id else None
                if not student:
                    errors.append(f"Student {student_id} not found")
                    continue

                if not can_access_center(user, student.center_id):
                    errors.append(f"Access denied for student {student_id}")
                    continue

                now = to_iso_timestamp(self._clock())

                self._attendance.upsert_by_date(
                    ByDateEntry(
                        date=date,
                        center_id=student.center_id,
                        student_id=student.student_id,
                        status=status,
                        student_name=student.name,
                        marked_at=now,
                        marked_by=user.user_id,
                    )
                )
                self._attendance.upsert_by_student(
                    ByStudentEntry(
                        student_id=student.student_id,
                        date=date,
                        status=status,
                        center_id=student.center_id,
                        marked_at=now,
                        marked_by=user.user_id,
                    )
                )

                saved.append(
                    AttendanceRecord(
                        student_id=student.student_id,
                        student_name=student.name,
                        date=date,
                        status=status,
                        center_id=student.center_id,
                        marked_by=user.user_id,
                        marked_at=now,
                    )
                )
            except Exception:
                # A failure between the two upserts leaves the views diverged;
                # AttendanceReconciler repairs that.
                logger.exception("Error processing attendance for student %s", student_id)
                errors.append(f"Failed to process student {student_id}")

        logger.info("marked %s: saved=%d errors=%d by=%s", date, len(saved), len(errors), user.user_id)
        return MarkResult(saved=saved, errors=errors)

    def query(
        self,
        user: CurrentUser,
        *,
        date: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> list[AttendanceRecord]:
        if date:
            return self.get_by_date(user, date)
        if student_id:
            return self.get_by_student(user, student_id)
        raise ValidationError("Either date or studentId parameter is required")

    def by_date_entries(self, user: CurrentUser, date: str) -> Sequence[ByDateEntry]:
        """By-date view rows visible to the caller."""

        date = require_iso_date(date)
        scope = scope_for(user)
        if scope.global_access:
            return self._attendance.list_by_date_all_centers(date=date)
        if scope.is_empty:
            return []
        entries = self._attendance.list_by_date(date=date, center_id=scope.center_id)
        return [e for e in entries if e.center_id == scope.center_id]

    def get_by_date(self, user: CurrentUser, date: str) -> list[AttendanceRecord]:
        return [_to_record(e) for e in self.by_date_entries(user, date)]

    def get_by_student(self, user: CurrentUser, student_id: str) -> list[AttendanceRecord]:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        if not can_access_center(user, student.center_id):
            raise AuthorizationError("Access denied to this student")

        records = [
            AttendanceRecord(
                student_id=student.student_id,
                student_name=student.name,
                date=e.date,
                status=e.status,
                center_id=student.center_id,
                marked_by=e.marked_by,
                marked_at=e.marked_at,
            )
            for e in self._attendance.list_by_student(student_id=student.student_id)
        ]
        records.sort(key=lambda r: r.date, reverse=True)
        return records

    def roster(self, user: CurrentUser, *, date: Optional[str] = None) -> list[RosterRow]:
        """Accessible active students with the date's status, or None if unmarked."""

        date = date or today_utc()
        scope = scope_for(user)
        if scope.is_empty:
            return []

        students = self._students.list_active(center_id=None if scope.global_access else scope.center_id)
        status_by_student = {e.student_id: e.status for e in self.by_date_entries(user, date)}

        rows = [
            RosterRow(
                student_id=s.student_id,
                name=s.name,
                center_id=s.center_id,
                program_name=s.program_name,
                attendance_status=status_by_student.get(s.student_id),
            )
            for s in students
        ]
        rows.sort(key=lambda r: r.name.lower())
        return rows
