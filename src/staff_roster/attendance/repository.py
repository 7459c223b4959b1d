from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceHistoryRow, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_pair(self, *, shift_id: int, user_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, *, shift_id: int, user_id: int, status: AttendanceStatus = AttendanceStatus.ABSENT) -> AttendanceRecord:
        """Insert the pair's record; returns the existing one if it is already there."""

        raise NotImplementedError

    def set_check_in_if_unset(self, *, attendance_id: int, check_in: datetime, status: AttendanceStatus) -> bool:
        """Atomic compare-and-set. False when check-in was already recorded."""

        raise NotImplementedError

    def set_check_out_if_unset(self, *, attendance_id: int, check_out: datetime, status: AttendanceStatus) -> bool:
        """Atomic compare-and-set. False when check-out was already recorded
        or check-in is missing."""

        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        attendance_id: int,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> bool:
        """Admin-only override; writes all fields as given."""

        raise NotImplementedError

    def delete_for_pair(self, *, shift_id: int, user_id: int) -> int:
        raise NotImplementedError

    def list_for_user(
        self,
        *,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: int = 100,
    ) -> Sequence[AttendanceHistoryRow]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
