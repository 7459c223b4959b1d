from __future__ import annotations

from datetime import date, time
from typing import Any, Dict, Optional, Sequence

from ..core.enums import ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Shift, ShiftSummary
from .repository import ShiftRepository

_SHIFT_COLUMNS = "s.shift_id, s.shift_date, s.shift_type, s.start_time, s.end_time, s.capacity"


def row_to_shift(r: Dict[str, Any]) -> Shift:
    return Shift(
        shift_id=int(r["shift_id"]),
        shift_date=r["shift_date"],
        shift_type=ShiftType(r["shift_type"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        capacity=int(r["capacity"]),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, shift_id: int, *, for_update: bool = False) -> Optional[Shift]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}
                FROM shifts s
                WHERE s.shift_id=%s{lock}
                """,
                (int(shift_id),),
            )
            r = fetchone(cur)
            return row_to_shift(r) if r else None

    def list_summaries(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        shift_type: Optional[ShiftType] = None,
    ) -> Sequence[ShiftSummary]:
        clauses = ["1=1"]
        params: list[object] = []
        if start is not None:
            clauses.append("s.shift_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("s.shift_date <= %s")
            params.append(end)
        if shift_type is not None:
            clauses.append("s.shift_type = %s")
            params.append(shift_type.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}, COUNT(a.assignment_id) AS assigned_count
                FROM shifts s
                LEFT JOIN shift_assignments a ON a.shift_id = s.shift_id
                WHERE {where}
                GROUP BY s.shift_id
                ORDER BY s.shift_date ASC, s.start_time ASC
                """,
                tuple(params),
            )
            return [
                ShiftSummary(shift=row_to_shift(r), assigned_count=int(r["assigned_count"] or 0))
                for r in fetchall(cur)
            ]

    def create(
        self,
        *,
        shift_date: date,
        shift_type: ShiftType,
        start_time: time,
        end_time: time,
        capacity: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shifts(shift_date, shift_type, start_time, end_time, capacity)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (shift_date, shift_type.value, start_time, end_time, int(capacity)),
            )
            return int(cur.lastrowid)

    def update(self, shift: Shift) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shifts
                SET shift_date=%s, shift_type=%s, start_time=%s, end_time=%s, capacity=%s
                WHERE shift_id=%s
                """,
                (
                    shift.shift_date,
                    shift.shift_type.value,
                    shift.start_time,
                    shift.end_time,
                    int(shift.capacity),
                    int(shift.shift_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, shift_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shifts WHERE shift_id=%s", (int(shift_id),))
            return cur.rowcount > 0
