"""Table names, their DDL and the per-process "already ensured" cache."""
from __future__ import annotations

import logging

from .connection import DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)


class Tables:
    USERS = "users"
    STUDENTS = "students"
    ATTENDANCE_BY_DATE = "attendance_by_date"
    ATTENDANCE_BY_STUDENT = "attendance_by_student"


TABLE_DDL: dict[str, str] = {
    Tables.USERS: """
        CREATE TABLE IF NOT EXISTS users (
            user_id VARCHAR(64) NOT NULL PRIMARY KEY,
            email VARCHAR(255) NOT NULL UNIQUE,
            display_name VARCHAR(255) NOT NULL,
            password_hash VARCHAR(255) NOT NULL,
            role VARCHAR(20) NOT NULL,
            center_id VARCHAR(64) NULL,
            center_name VARCHAR(255) NULL,
            is_active TINYINT(1) NOT NULL DEFAULT 1
        ) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci
    """,
    Tables.STUDENTS: """
        CREATE TABLE IF NOT EXISTS students (
            student_id VARCHAR(64) NOT NULL PRIMARY KEY,
            center_id VARCHAR(64) NOT NULL,
            name VARCHAR(255) NOT NULL,
            program_name VARCHAR(255) NOT NULL DEFAULT '',
            is_active TINYINT(1) NOT NULL DEFAULT 1,
            INDEX ix_students_center (center_id)
        ) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci
    """,
    Tables.ATTENDANCE_BY_DATE: """
        CREATE TABLE IF NOT EXISTS attendance_by_date (
            partition_key VARCHAR(100) NOT NULL,
            student_id VARCHAR(64) NOT NULL,
            status VARCHAR(10) NOT NULL,
            student_name VARCHAR(255) NOT NULL DEFAULT '',
            marked_at VARCHAR(32) NOT NULL,
            marked_by VARCHAR(64) NOT NULL,
            PRIMARY KEY (partition_key, student_id)
        ) CHARACTER SET utf8mb4 COLLATE utf8mb4_bin
    """,
    Tables.ATTENDANCE_BY_STUDENT: """
        CREATE TABLE IF NOT EXISTS attendance_by_student (
            student_id VARCHAR(64) NOT NULL,
            attendance_date CHAR(10) NOT NULL,
            status VARCHAR(10) NOT NULL,
            center_id VARCHAR(64) NOT NULL,
            marked_at VARCHAR(32) NOT NULL,
            marked_by VARCHAR(64) NOT NULL,
            PRIMARY KEY (student_id, attendance_date),
            INDEX ix_attendance_by_student_date (attendance_date)
        ) CHARACTER SET utf8mb4 COLLATE utf8mb4_bin
    """,
}


class TableInitializer:
    """Creates tables on first use, at most once per process per table.

    The cache is an optimization only: CREATE TABLE IF NOT EXISTS is idempotent.
    """

    _initialized: set[str] = set()

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def ensure(self, *table_names: str) -> None:
        pending = [t for t in table_names if t not in self._initialized]
        if not pending:
            return
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            for name in pending:
                cur.execute(TABLE_DDL[name])
        for name in pending:
            logger.debug("table %s ready", name)
            self._initialized.add(name)

    @classmethod
    def reset(cls) -> None:
        cls._initialized.clear()
