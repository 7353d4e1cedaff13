"""Center access rules shared by every attendance read and write path.

Admins are global; coordinators are scoped to their assigned center. Keep
these functions pure: both the marking and the query services call them, so
any divergence between the two paths would be a security bug.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..users.model import CurrentUser


@dataclass(frozen=True)
class AccessScope:
    global_access: bool
    center_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """Scoped caller without an assigned center: sees nothing."""
        return not self.global_access and not self.center_id


def can_access_center(user: CurrentUser, center_id: str) -> bool:
    if user.role == Role.ADMIN:
        return True
    return bool(user.center_id) and user.center_id == center_id


def scope_for(user: CurrentUser) -> AccessScope:
    if user.role == Role.ADMIN:
        return AccessScope(global_access=True)
    return AccessScope(global_access=False, center_id=user.center_id or None)
