from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.edutrack.edutrack.attendance.model import ByDateEntry, ByStudentEntry
from src.edutrack.edutrack.attendance.service import AttendanceService
from src.edutrack.edutrack.core.enums import Role
from src.edutrack.edutrack.students.model import Student
from src.edutrack.edutrack.users.model import CurrentUser, User


class InMemoryAttendance:
    """Both views as dicts keyed exactly like the MySQL primary keys."""

    def __init__(self):
        self.by_date: dict[tuple[str, str], ByDateEntry] = {}
        self.by_student: dict[tuple[str, str], ByStudentEntry] = {}
        self.fail_by_student_for: set[str] = set()

    def upsert_by_date(self, entry: ByDateEntry) -> None:
        self.by_date[(entry.partition_key, entry.student_id)] = entry

    def upsert_by_student(self, entry: ByStudentEntry) -> None:
        if entry.student_id in self.fail_by_student_for:
            raise RuntimeError("storage unavailable")
        self.by_student[(entry.student_id, entry.date)] = entry

    def list_by_date(self, *, date: str, center_id: str):
        pk = f"{date}_{center_id}"
        return [e for (p, _), e in self.by_date.items() if p == pk]

    def list_by_date_all_centers(self, *, date: str):
        low, high = f"{date}_", f"{date}~"
        return [e for (p, _), e in self.by_date.items() if low <= p < high]

    def list_by_student(self, *, student_id: str):
        return [e for (s, _), e in self.by_student.items() if s == student_id]

    def list_by_student_for_date(self, *, date: str):
        return [e for (_, d), e in self.by_student.items() if d == date]


@dataclass
class InMemoryStudents:
    students: dict[str, Student] = field(default_factory=dict)

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self.students.get(student_id)

    def list_active(self, *, center_id: Optional[str] = None):
        return [
            s for s in self.students.values()
            if s.is_active and (center_id is None or s.center_id == center_id)
        ]


@dataclass
class InMemoryUsers:
    users: dict[str, User] = field(default_factory=dict)

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)


class StepClock:
    """Returns a later instant on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step
        self.calls = 0

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        self.calls += 1
        return value


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 10, 8, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> StepClock:
    return StepClock(fixed_now)


@pytest.fixture
def students_repo() -> InMemoryStudents:
    return InMemoryStudents(
        {
            "s1": Student("s1", "center-north", "Amina Diallo", "Foundations"),
            "s2": Student("s2", "center-north", "Bao Tran", "Life Skills"),
            "s3": Student("s3", "center-south", "Carlos Mendez", "Foundations"),
            "s4": Student("s4", "center-south", "Dara Okafor", "Life Skills", is_active=False),
        }
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def service(attendance_repo, students_repo, clock) -> AttendanceService:
    return AttendanceService(attendance_repo, students_repo, clock=clock)


def _caller(user_id: str, role: Role, center_id: Optional[str]) -> CurrentUser:
    return CurrentUser(
        user_id=user_id,
        email=f"{user_id}@edutrack.local",
        role=role,
        center_id=center_id,
        center_name=None,
        display_name=user_id,
    )


@pytest.fixture
def admin() -> CurrentUser:
    return _caller("u-admin", Role.ADMIN, None)


@pytest.fixture
def north() -> CurrentUser:
    return _caller("u-north", Role.COORDINATOR, "center-north")


@pytest.fixture
def south() -> CurrentUser:
    return _caller("u-south", Role.COORDINATOR, "center-south")


@pytest.fixture
def unassigned() -> CurrentUser:
    return _caller("u-none", Role.COORDINATOR, None)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    def user(user_id, email, role, center_id, password, is_active=True):
        return User(
            user_id=user_id,
            email=email,
            display_name=user_id,
            password_hash=generate_password_hash(password),
            role=role,
            center_id=center_id,
            center_name=None,
            is_active=is_active,
        )

    return InMemoryUsers(
        {
            "u-admin": user("u-admin", "admin@edutrack.local", Role.ADMIN, None, "admin123"),
            "u-north": user("u-north", "north@edutrack.local", Role.COORDINATOR, "center-north", "north123"),
            "u-gone": user("u-gone", "gone@edutrack.local", Role.COORDINATOR, "center-south", "gone123", False),
        }
    )
