from __future__ import annotations

from typing import Protocol, Sequence

from .model import ByDateEntry, ByStudentEntry


class AttendanceRepository(Protocol):
    """Both denormalized attendance views.

    Writes are full replacements keyed by the view's (partition, row) key. The
    two upserts are independent: nothing makes them atomic together.
    """

    def upsert_by_date(self, entry: ByDateEntry) -> None:
        raise NotImplementedError

    def upsert_by_student(self, entry: ByStudentEntry) -> None:
        raise NotImplementedError

    def list_by_date(self, *, date: str, center_id: str) -> Sequence[ByDateEntry]:
        """One (date, center) partition."""

        raise NotImplementedError

    def list_by_date_all_centers(self, *, date: str) -> Sequence[ByDateEntry]:
        """Every partition whose key falls in [date_, date~)."""

        raise NotImplementedError

    def list_by_student(self, *, student_id: str) -> Sequence[ByStudentEntry]:
        raise NotImplementedError

    def list_by_student_for_date(self, *, date: str) -> Sequence[ByStudentEntry]:
        """By-student rows of every student for one date (reconciliation scan)."""

        raise NotImplementedError
