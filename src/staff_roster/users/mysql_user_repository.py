from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import Department, Role, ShiftType, StaffRole
from ..core.exceptions import DuplicateEmailError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, email, role, staff_role, department, shift_preference, contact_number, is_active"


def _optional_enum(enum_cls, value):
    return enum_cls(value) if value else None


def _row_to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        email=row["email"],
        role=Role(row["role"]),
        staff_role=_optional_enum(StaffRole, row.get("staff_role")),
        department=_optional_enum(Department, row.get("department")),
        shift_preference=_optional_enum(ShiftType, row.get("shift_preference")),
        contact_number=row.get("contact_number"),
        is_active=bool(row.get("is_active", True)),
    )


def _value(member) -> Optional[str]:
    return member.value if member is not None else None


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int, *, for_update: bool = False) -> Optional[User]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s{lock}", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_staff(
        self,
        *,
        name: Optional[str] = None,
        staff_role: Optional[StaffRole] = None,
        department: Optional[Department] = None,
        shift_preference: Optional[ShiftType] = None,
        is_active: Optional[bool] = None,
    ) -> Sequence[User]:
        clauses = ["role=%s"]
        params: list[object] = [Role.STAFF.value]
        if name:
            clauses.append("LOWER(full_name) LIKE %s")
            params.append(f"%{name.lower()}%")
        if staff_role is not None:
            clauses.append("staff_role=%s")
            params.append(staff_role.value)
        if department is not None:
            clauses.append("department=%s")
            params.append(department.value)
        if shift_preference is not None:
            clauses.append("shift_preference=%s")
            params.append(shift_preference.value)
        if is_active is not None:
            clauses.append("is_active=%s")
            params.append(1 if is_active else 0)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {' AND '.join(clauses)} ORDER BY full_name ASC, user_id ASC",
                tuple(params),
            )
            return [_row_to_user(r) for r in fetchall(cur)]

    def create_staff(
        self,
        *,
        full_name: str,
        email: str,
        staff_role: StaffRole,
        department: Department,
        shift_preference: Optional[ShiftType] = None,
        contact_number: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(full_name, email, role, staff_role, department, shift_preference, contact_number)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        full_name,
                        email,
                        Role.STAFF.value,
                        staff_role.value,
                        department.value,
                        _value(shift_preference),
                        contact_number,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.errors.IntegrityError as e:
            raise DuplicateEmailError("Email already in use") from e

    def update(self, user: User) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE users
                    SET full_name=%s, email=%s, staff_role=%s, department=%s,
                        shift_preference=%s, contact_number=%s, is_active=%s
                    WHERE user_id=%s
                    """,
                    (
                        user.full_name,
                        user.email,
                        _value(user.staff_role),
                        _value(user.department),
                        _value(user.shift_preference),
                        user.contact_number,
                        1 if user.is_active else 0,
                        int(user.user_id),
                    ),
                )
                return cur.rowcount > 0
        except mysql.connector.errors.IntegrityError as e:
            raise DuplicateEmailError("Email already in use") from e

    def delete_by_id(self, user_id: int) -> bool:
        # Assignments and attendance rows go with the user (ON DELETE CASCADE).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
