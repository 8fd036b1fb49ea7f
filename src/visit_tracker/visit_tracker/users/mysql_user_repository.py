from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

USER_COLUMNS = "id, name, role, password_hash, phone_number, reporting_manager_email, profile_pic, created_at"


def _user_from_row(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        name=row["name"],
        role=Role(row["role"]),
        password_hash=row["password_hash"],
        phone_number=row.get("phone_number"),
        reporting_manager_email=row.get("reporting_manager_email"),
        profile_pic=row.get("profile_pic"),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, name: str, role: Role) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE name=%s AND role=%s", (name, role.value))
            row = fetchone(cur)
            return _user_from_row(row) if row else None

    def find_by_name(self, name: str) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE name=%s ORDER BY id", (name,))
            return [_user_from_row(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY name, role")
            return [_user_from_row(r) for r in fetchall(cur)]

    def upsert(
        self,
        *,
        name: str,
        role: Role,
        password_hash: str,
        phone_number: Optional[str],
        reporting_manager_email: Optional[str],
        profile_pic: Optional[str],
        created_at: datetime,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, role, password_hash, phone_number, reporting_manager_email, profile_pic, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    password_hash=VALUES(password_hash),
                    phone_number=VALUES(phone_number),
                    reporting_manager_email=VALUES(reporting_manager_email),
                    profile_pic=VALUES(profile_pic)
                """,
                (name, role.value, password_hash, phone_number, reporting_manager_email, profile_pic, created_at),
            )

    def delete_with_visits(self, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM visits WHERE user_name=%s", (name,))
            removed = int(cur.rowcount)
            cur.execute("DELETE FROM users WHERE name=%s", (name,))
            return removed
