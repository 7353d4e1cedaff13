from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from ..database.tables import TableInitializer, Tables
from .model import User
from .repository import UserRepository

_SELECT = """
    SELECT user_id, email, display_name, password_hash, role, center_id, center_name, is_active
    FROM users
"""


def _row_to_user(r: dict) -> User:
    return User(
        user_id=str(r["user_id"]),
        email=r["email"],
        display_name=r["display_name"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        center_id=r.get("center_id"),
        center_name=r.get("center_name"),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection, tables: Optional[TableInitializer] = None):
        self._conn_factory = conn_factory
        self._tables = tables or TableInitializer(conn_factory)

    def get_by_id(self, user_id: str) -> Optional[User]:
        self._tables.ensure(Tables.USERS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_id=%s", (user_id,))
            r = fetchone(cur)
            return _row_to_user(r) if r else None

    def get_by_email(self, email: str) -> Optional[User]:
        self._tables.ensure(Tables.USERS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE email=%s", (email,))
            r = fetchone(cur)
            return _row_to_user(r) if r else None
