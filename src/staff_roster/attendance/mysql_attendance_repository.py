from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..shifts.mysql_shift_repository import row_to_shift
from .model import AttendanceHistoryRow, AttendanceRecord
from .repository import AttendanceRepository

_RECORD_COLUMNS = "ar.attendance_id, ar.shift_id, ar.user_id, ar.check_in_time, ar.check_out_time, ar.status, ar.remarks"


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        shift_id=int(r["shift_id"]),
        user_id=int(r["user_id"]),
        check_in=r.get("check_in_time"),
        check_out=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_pair(self, *, shift_id: int, user_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.shift_id=%s AND ar.user_id=%s",
                (int(shift_id), int(user_id)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create(self, *, shift_id: int, user_id: int, status: AttendanceStatus = AttendanceStatus.ABSENT) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            # IGNORE: a concurrent creator may have won; we read its row back below.
            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(shift_id, user_id, status)
                VALUES(%s,%s,%s)
                """,
                (int(shift_id), int(user_id), status.value),
            )
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.shift_id=%s AND ar.user_id=%s",
                (int(shift_id), int(user_id)),
            )
            return _row_to_record(fetchone(cur))

    def set_check_in_if_unset(self, *, attendance_id: int, check_in: datetime, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, status=%s
                WHERE attendance_id=%s AND check_in_time IS NULL
                """,
                (check_in, status.value, int(attendance_id)),
            )
            return cur.rowcount == 1

    def set_check_out_if_unset(self, *, attendance_id: int, check_out: datetime, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s
                WHERE attendance_id=%s AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (check_out, status.value, int(attendance_id)),
            )
            return cur.rowcount == 1

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, status=%s, remarks=%s
                WHERE attendance_id=%s
                """,
                (check_in, check_out, status.value, remarks, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete_for_pair(self, *, shift_id: int, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE shift_id=%s AND user_id=%s",
                (int(shift_id), int(user_id)),
            )
            return int(cur.rowcount)

    def list_for_user(
        self,
        *,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: int = 100,
    ) -> Sequence[AttendanceHistoryRow]:
        clauses = ["ar.user_id=%s"]
        params: list[object] = [int(user_id)]
        if start is not None:
            clauses.append("s.shift_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("s.shift_date <= %s")
            params.append(end)
        if status is not None:
            clauses.append("ar.status=%s")
            params.append(status.value)
        params.append(int(limit))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS},
                       s.shift_date, s.shift_type, s.start_time, s.end_time, s.capacity
                FROM attendance_records ar
                JOIN shifts s ON s.shift_id = ar.shift_id
                WHERE {where}
                ORDER BY s.shift_date DESC, s.start_time DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [AttendanceHistoryRow(record=_row_to_record(r), shift=row_to_shift(r)) for r in fetchall(cur)]

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                JOIN shifts s ON s.shift_id = ar.shift_id
                WHERE s.shift_date=%s
                ORDER BY ar.attendance_id ASC
                """,
                (work_date,),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
