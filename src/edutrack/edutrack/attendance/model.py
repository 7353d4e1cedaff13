from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import PARTITION_RANGE_END, PARTITION_SEPARATOR
from ..core.enums import AttendanceStatus


def by_date_partition(date: str, center_id: str) -> str:
    return f"{date}{PARTITION_SEPARATOR}{center_id}"


def by_date_range(date: str) -> tuple[str, str]:
    """Half-open partition-key range [date_, date~) covering every center."""
    return f"{date}{PARTITION_SEPARATOR}", f"{date}{PARTITION_RANGE_END}"


def center_from_partition(partition_key: str) -> str:
    _, _, center_id = partition_key.partition(PARTITION_SEPARATOR)
    return center_id


@dataclass(frozen=True)
class ByDateEntry:
    """Row of the by-date view: (date, center) -> student -> status."""

    date: str
    center_id: str
    student_id: str
    status: AttendanceStatus
    student_name: str
    marked_at: str
    marked_by: str

    @property
    def partition_key(self) -> str:
        return by_date_partition(self.date, self.center_id)


@dataclass(frozen=True)
class ByStudentEntry:
    """Row of the by-student view: student -> date -> status."""

    student_id: str
    date: str
    status: AttendanceStatus
    center_id: str
    marked_at: str
    marked_by: str


@dataclass(frozen=True)
class AttendanceRecord:
    """Read model returned to API callers."""

    student_id: str
    student_name: str
    date: str
    status: AttendanceStatus
    center_id: str
    marked_by: Optional[str] = None
    marked_at: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "studentId": self.student_id,
            "studentName": self.student_name,
            "date": self.date,
            "status": self.status.value,
            "centerId": self.center_id,
        }
        if self.marked_by is not None:
            out["markedBy"] = self.marked_by
        if self.marked_at is not None:
            out["markedAt"] = self.marked_at
        return out


@dataclass(frozen=True)
class MarkResult:
    saved: list[AttendanceRecord]
    errors: list[str]

    def to_dict(self) -> dict:
        return {"saved": [r.to_dict() for r in self.saved], "errors": list(self.errors)}
