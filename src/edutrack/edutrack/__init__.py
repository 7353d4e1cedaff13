"""EduTrack attendance package.

This package is organized by feature modules (attendance, students, users,
dashboard) with a thin Flask controller layer over service/repository layers.
Attendance marks are stored twice, once per read path, see
``attendance.reconciler`` for how the two views are kept in agreement.
"""
from __future__ import annotations

from .attendance.reconciler import AttendanceReconciler
from .attendance.service import AttendanceService
from .container import Container, build_container, wire_container
from .dashboard.service import AttendanceStatsService
from .users.service import AuthService

__all__ = [
    "AttendanceReconciler",
    "AttendanceService",
    "AttendanceStatsService",
    "AuthService",
    "Container",
    "build_container",
    "wire_container",
]
