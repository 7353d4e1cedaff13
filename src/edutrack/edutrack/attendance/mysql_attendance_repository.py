from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..database.tables import TableInitializer, Tables
from .model import ByDateEntry, ByStudentEntry, by_date_partition, by_date_range, center_from_partition
from .repository import AttendanceRepository


def _row_to_by_date(r: dict, *, date: str) -> ByDateEntry:
    return ByDateEntry(
        date=date,
        center_id=center_from_partition(r["partition_key"]),
        student_id=str(r["student_id"]),
        status=AttendanceStatus(r["status"]),
        student_name=r.get("student_name") or "",
        marked_at=r["marked_at"],
        marked_by=r["marked_by"],
    )


def _row_to_by_student(r: dict) -> ByStudentEntry:
    return ByStudentEntry(
        student_id=str(r["student_id"]),
        date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        center_id=r["center_id"],
        marked_at=r["marked_at"],
        marked_by=r["marked_by"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, tables: Optional[TableInitializer] = None):
        self._conn_factory = conn_factory
        self._tables = tables or TableInitializer(conn_factory)

    def upsert_by_date(self, entry: ByDateEntry) -> None:
        self._tables.ensure(Tables.ATTENDANCE_BY_DATE)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                REPLACE INTO attendance_by_date(partition_key, student_id, status, student_name, marked_at, marked_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.partition_key,
                    entry.student_id,
                    entry.status.value,
                    entry.student_name,
                    entry.marked_at,
                    entry.marked_by,
                ),
            )

    def upsert_by_student(self, entry: ByStudentEntry) -> None:
        self._tables.ensure(Tables.ATTENDANCE_BY_STUDENT)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                REPLACE INTO attendance_by_student(student_id, attendance_date, status, center_id, marked_at, marked_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.student_id,
                    entry.date,
                    entry.status.value,
                    entry.center_id,
                    entry.marked_at,
                    entry.marked_by,
                ),
            )

    def list_by_date(self, *, date: str, center_id: str) -> Sequence[ByDateEntry]:
        self._tables.ensure(Tables.ATTENDANCE_BY_DATE)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT partition_key, student_id, status, student_name, marked_at, marked_by
                FROM attendance_by_date
                WHERE partition_key=%s
                """,
                (by_date_partition(date, center_id),),
            )
            return [_row_to_by_date(r, date=date) for r in fetchall(cur)]

    def list_by_date_all_centers(self, *, date: str) -> Sequence[ByDateEntry]:
        self._tables.ensure(Tables.ATTENDANCE_BY_DATE)
        low, high = by_date_range(date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT partition_key, student_id, status, student_name, marked_at, marked_by
                FROM attendance_by_date
                WHERE partition_key >= %s AND partition_key < %s
                """,
                (low, high),
            )
            return [_row_to_by_date(r, date=date) for r in fetchall(cur)]

    def list_by_student(self, *, student_id: str) -> Sequence[ByStudentEntry]:
        self._tables.ensure(Tables.ATTENDANCE_BY_STUDENT)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, attendance_date, status, center_id, marked_at, marked_by
                FROM attendance_by_student
                WHERE student_id=%s
                """,
                (student_id,),
            )
            return [_row_to_by_student(r) for r in fetchall(cur)]

    def list_by_student_for_date(self, *, date: str) -> Sequence[ByStudentEntry]:
        self._tables.ensure(Tables.ATTENDANCE_BY_STUDENT)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, attendance_date, status, center_id, marked_at, marked_by
                FROM attendance_by_student
                WHERE attendance_date=%s
                """,
                (date,),
            )
            return [_row_to_by_student(r) for r in fetchall(cur)]
