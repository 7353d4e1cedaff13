from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..database.tables import TableInitializer, Tables
from .model import Student
from .repository import StudentRepository


def _row_to_student(r: dict) -> Student:
    return Student(
        student_id=str(r["student_id"]),
        center_id=str(r["center_id"]),
        name=r["name"],
        program_name=r.get("program_name") or "",
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection, tables: Optional[TableInitializer] = None):
        self._conn_factory = conn_factory
        self._tables = tables or TableInitializer(conn_factory)

    def get_by_id(self, student_id: str) -> Optional[Student]:
        self._tables.ensure(Tables.STUDENTS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, center_id, name, program_name, is_active
                FROM students
                WHERE student_id=%s
                """,
                (student_id,),
            )
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def list_active(self, *, center_id: Optional[str] = None) -> Sequence[Student]:
        self._tables.ensure(Tables.STUDENTS)
        clauses = ["is_active=1"]
        params: list[object] = []
        if center_id is not None:
            clauses.append("center_id=%s")
            params.append(center_id)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT student_id, center_id, name, program_name, is_active
                FROM students
                WHERE {where}
                """,
                tuple(params),
            )
            return [_row_to_student(r) for r in fetchall(cur)]
