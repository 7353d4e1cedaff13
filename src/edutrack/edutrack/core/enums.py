from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role used for center scoping."""

    ADMIN = "admin"
    COORDINATOR = "coordinator"


class AttendanceStatus(str, Enum):
    """Once-per-day attendance fact stored in both attendance views."""

    PRESENT = "present"
    ABSENT = "absent"
