from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a staff account.

    Note: Plain data object (no DB access code).
    """

    user_id: str
    email: str
    display_name: str
    password_hash: str
    role: Role
    center_id: Optional[str]
    center_name: Optional[str]
    is_active: bool = True


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller resolved from a bearer token."""

    user_id: str
    email: str
    role: Role
    center_id: Optional[str]
    center_name: Optional[str]
    display_name: str

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "role": self.role.value,
            "centerId": self.center_id,
            "centerName": self.center_name,
            "displayName": self.display_name,
        }
