from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Domain entity: a student enrolled at one center."""

    student_id: str
    center_id: str
    name: str
    program_name: str = ""
    is_active: bool = True
