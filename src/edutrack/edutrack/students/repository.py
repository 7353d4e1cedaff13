from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Student lookups the attendance services depend on.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def list_active(self, *, center_id: Optional[str] = None) -> Sequence[Student]:
        raise NotImplementedError
