from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.exceptions import DuplicateAssignmentError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..shifts.mysql_shift_repository import row_to_shift
from .model import AssignedShift, Assignment
from .repository import AssignmentRepository

_JOINED_SELECT = """
    SELECT a.assignment_id, a.user_id, u.full_name,
           s.shift_id, s.shift_date, s.shift_type, s.start_time, s.end_time, s.capacity
    FROM shift_assignments a
    JOIN shifts s ON s.shift_id = a.shift_id
    JOIN users u ON u.user_id = a.user_id
"""


def _row_to_assignment(r: Dict[str, Any]) -> Assignment:
    return Assignment(
        assignment_id=int(r["assignment_id"]),
        shift_id=int(r["shift_id"]),
        user_id=int(r["user_id"]),
        assigned_at=r.get("assigned_at"),
    )


def _row_to_assigned_shift(r: Dict[str, Any]) -> AssignedShift:
    return AssignedShift(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        shift=row_to_shift(r),
        assignment_id=int(r["assignment_id"]),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, shift_id: int, user_id: int) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT assignment_id, shift_id, user_id, assigned_at
                FROM shift_assignments
                WHERE shift_id=%s AND user_id=%s
                """,
                (int(shift_id), int(user_id)),
            )
            r = fetchone(cur)
            return _row_to_assignment(r) if r else None

    def count_for_shift(self, shift_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM shift_assignments WHERE shift_id=%s", (int(shift_id),))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_for_shift(self, shift_id: int) -> Sequence[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT assignment_id, shift_id, user_id, assigned_at
                FROM shift_assignments
                WHERE shift_id=%s
                ORDER BY assignment_id ASC
                """,
                (int(shift_id),),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AssignedShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _JOINED_SELECT
                + """
                WHERE s.shift_date=%s
                ORDER BY a.assignment_id ASC
                """,
                (work_date,),
            )
            return [_row_to_assigned_shift(r) for r in fetchall(cur)]

    def list_for_user_on_date(self, *, user_id: int, work_date: date) -> Sequence[AssignedShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _JOINED_SELECT
                + """
                WHERE a.user_id=%s AND s.shift_date=%s
                ORDER BY a.assignment_id ASC
                """,
                (int(user_id), work_date),
            )
            return [_row_to_assigned_shift(r) for r in fetchall(cur)]

    def create(self, *, shift_id: int, user_id: int) -> Assignment:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO shift_assignments(shift_id, user_id) VALUES(%s,%s)",
                    (int(shift_id), int(user_id)),
                )
                return Assignment(assignment_id=int(cur.lastrowid), shift_id=int(shift_id), user_id=int(user_id))
        except mysql.connector.errors.IntegrityError as e:
            raise DuplicateAssignmentError("Staff member already assigned to this shift") from e

    def delete(self, *, shift_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM shift_assignments WHERE shift_id=%s AND user_id=%s",
                (int(shift_id), int(user_id)),
            )
            return cur.rowcount > 0
