from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciler import AttendanceReconciler
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from .dashboard.service import AttendanceStatsService
from .database.connection import DBConfig, DatabaseConnection
from .database.tables import TableInitializer
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    attendance_service: AttendanceService
    reconciler: AttendanceReconciler
    stats_service: AttendanceStatsService

    conn: Optional[DatabaseConnection] = None


def wire_container(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    secret_key: str,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    allow_mock_token: bool = False,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    attendance_service = AttendanceService(attendance_repo, students_repo)
    return Container(
        users_repo=users_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(
            users_repo,
            secret_key=secret_key,
            max_age_seconds=token_max_age_seconds,
            allow_mock_token=allow_mock_token,
        ),
        attendance_service=attendance_service,
        reconciler=AttendanceReconciler(attendance_repo, students_repo),
        stats_service=AttendanceStatsService(attendance_service),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    allow_mock_token: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    tables = TableInitializer(conn)

    return wire_container(
        users_repo=MySQLUserRepository(conn, tables),
        students_repo=MySQLStudentRepository(conn, tables),
        attendance_repo=MySQLAttendanceRepository(conn, tables),
        secret_key=secret_key,
        token_max_age_seconds=token_max_age_seconds,
        allow_mock_token=allow_mock_token,
        conn=conn,
    )
