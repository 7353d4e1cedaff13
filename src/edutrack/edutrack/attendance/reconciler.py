"""Detects and repairs disagreement between the two attendance views.

A mark is written to the by-date view and then to the by-student view with no
transaction around the pair. A crash or storage error between the writes, or
two interleaved batches, can leave the views disagreeing. This pass rewrites
the losing side:

- both rows present and different: the later ``marked_at`` wins, ties go to
  the by-date row;
- only one row present: it is copied into the other view.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..common.validators import require_iso_date
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..students.repository import StudentRepository
from ..users.model import CurrentUser
from .model import ByDateEntry, ByStudentEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    date: str
    checked: int = 0
    repaired: list[str] = field(default_factory=list)
    dry_run: bool = False

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "checked": self.checked,
            "repaired": list(self.repaired),
            "dryRun": self.dry_run,
        }


def _agree(a: ByDateEntry, b: ByStudentEntry) -> bool:
    return (
        a.status == b.status
        and a.marked_at == b.marked_at
        and a.marked_by == b.marked_by
        and a.center_id == b.center_id
    )


def _pick_by_date(
    date: str,
    student_id: str,
    rows: list[ByDateEntry],
    counterpart: Optional[ByStudentEntry],
) -> ByDateEntry:
    """One by-date row per student: the one in the by-student row's center, else the latest."""
    if len(rows) == 1:
        return rows[0]

    logger.warning(
        "student %s has by-date rows in %d centers on %s: %s",
        student_id,
        len(rows),
        date,
        ", ".join(sorted(r.center_id for r in rows)),
    )
    if counterpart is not None:
        for row in rows:
            if row.center_id == counterpart.center_id:
                return row
    return max(rows, key=lambda r: (r.marked_at, r.center_id))


class AttendanceReconciler:
    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    def reconcile_for(self, user: CurrentUser, *, date: str, dry_run: bool = False) -> ReconcileReport:
        if user.role != Role.ADMIN:
            raise AuthorizationError("Only admins can reconcile attendance")
        return self.reconcile(date=date, dry_run=dry_run)

    def reconcile(self, *, date: str, dry_run: bool = False, center_id: Optional[str] = None) -> ReconcileReport:
        date = require_iso_date(date)

        by_student = {e.student_id: e for e in self._attendance.list_by_student_for_date(date=date)}
        partitions: dict[str, list[ByDateEntry]] = {}
        for e in self._attendance.list_by_date_all_centers(date=date):
            partitions.setdefault(e.student_id, []).append(e)
        by_date = {
            student_id: _pick_by_date(date, student_id, rows, by_student.get(student_id))
            for student_id, rows in partitions.items()
        }
        if center_id is not None:
            by_date = {k: v for k, v in by_date.items() if v.center_id == center_id}
            by_student = {k: v for k, v in by_student.items() if v.center_id == center_id}

        report = ReconcileReport(date=date, dry_run=dry_run)
        for student_id in sorted(set(by_date) | set(by_student)):
            report.checked += 1
            d = by_date.get(student_id)
            s = by_student.get(student_id)

            if d is not None and s is not None and _agree(d, s):
                continue

            report.repaired.append(student_id)
            if dry_run:
                continue

            if s is None or (d is not None and d.marked_at >= s.marked_at):
                self._copy_to_by_student(d)
            else:
                self._copy_to_by_date(s, stale=d)

        if report.repaired:
            logger.warning(
                "attendance views diverged on %s for %d student(s)%s",
                date,
                len(report.repaired),
                " (dry run)" if dry_run else "",
            )
        return report

    def _copy_to_by_student(self, entry: ByDateEntry) -> None:
        self._attendance.upsert_by_student(
            ByStudentEntry(
                student_id=entry.student_id,
                date=entry.date,
                status=entry.status,
                center_id=entry.center_id,
                marked_at=entry.marked_at,
                marked_by=entry.marked_by,
            )
        )

    def _copy_to_by_date(self, entry: ByStudentEntry, *, stale: Optional[ByDateEntry]) -> None:
        if stale is not None and stale.center_id == entry.center_id:
            student_name = stale.student_name
        else:
            student = self._students.get_by_id(entry.student_id)
            student_name = student.name if student else ""

        self._attendance.upsert_by_date(
            ByDateEntry(
                date=entry.date,
                center_id=entry.center_id,
                student_id=entry.student_id,
                status=entry.status,
                student_name=student_name,
                marked_at=entry.marked_at,
                marked_by=entry.marked_by,
            )
        )
