from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import UserProfile
from .repository import UserRepository

_COLUMNS = """
    user_id, employee_id, full_name, email, password_hash, role,
    department, position, phone, is_active, created_at
"""


def _to_profile(row: dict) -> UserProfile:
    return UserProfile(
        user_id=int(row["user_id"]),
        employee_id=row["employee_id"],
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        department=row.get("department"),
        position=row.get("position"),
        phone=row.get("phone"),
        is_active=as_bool(row.get("is_active", 1)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM user_profiles WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[UserProfile]:
        return self._get_one("user_id", int(user_id))

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        return self._get_one("LOWER(email)", email.strip().lower())

    def get_by_employee_id(self, employee_id: str) -> Optional[UserProfile]:
        return self._get_one("employee_id", employee_id.strip())

    def create_user(
        self,
        *,
        employee_id: str,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO user_profiles(employee_id, full_name, email, password_hash, role)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (employee_id, full_name, email, password_hash, role.value),
            )
            return int(cur.lastrowid)

    def update_profile(
        self,
        user_id: int,
        *,
        full_name: str,
        phone: Optional[str],
        department: Optional[str],
        position: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE user_profiles
                SET full_name=%s, phone=%s, department=%s, position=%s
                WHERE user_id=%s
                """,
                (full_name, phone, department, position, int(user_id)),
            )
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE user_profiles SET is_active=%s WHERE user_id=%s",
                (1 if is_active else 0, int(user_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM user_profiles WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def list_all(self, *, active_only: bool = False) -> Sequence[UserProfile]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM user_profiles {where} ORDER BY full_name ASC")
            return [_to_profile(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM user_profiles WHERE is_active=1")
            row = fetchone(cur)
            return int(row["n"]) if row else 0
