from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..assignments.repository import AssignmentRepository
from ..common.datetime_utils import now_local, to_stored_precision
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AssignmentNotFoundError,
    AttendanceNotFoundError,
    NoCheckInError,
    ShiftNotFoundError,
    ValidationError,
)
from ..shifts.model import Shift
from ..shifts.repository import ShiftRepository
from ..users.model import Actor
from ..users.permissions import require_admin, require_self_or_admin
from .model import AttendanceHistoryRow, AttendanceRecord, AttendanceUpdate
from .repository import AttendanceRepository
from .status import derive_status

logger = logging.getLogger(__name__)


class AttendanceEngine:
    """Records check-in/check-out events and keeps the derived status current.

    Status has two write paths. ``set_derived`` recomputes it from the
    timestamps; ``set_explicit`` stores an admin's choice as-is, which stays
    in place until the next check-in/check-out or derived update.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        shifts: ShiftRepository,
        assignments: AssignmentRepository,
        *,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    ):
        self._attendance = attendance
        self._shifts = shifts
        self._assignments = assignments
        self._grace_minutes = int(grace_minutes)

    def _derive(self, shift: Shift, check_in: Optional[datetime], check_out: Optional[datetime]) -> AttendanceStatus:
        return derive_status(
            check_in,
            check_out,
            shift.start_time,
            shift.end_time,
            shift.shift_date,
            grace_minutes=self._grace_minutes,
        )

    def _get_shift(self, shift_id: int) -> Shift:
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise ShiftNotFoundError("Shift not found")
        return shift

    def record_check_in(self, actor: Actor, *, user_id: int, shift_id: int, at: Optional[datetime] = None) -> AttendanceRecord:
        require_self_or_admin(actor, user_id)
        user_id = int(user_id)
        shift_id = int(shift_id)
        at = to_stored_precision(at or now_local())

        if not self._assignments.get(shift_id=shift_id, user_id=user_id):
            raise AssignmentNotFoundError("You are not assigned to this shift")
        shift = self._get_shift(shift_id)

        record = self._attendance.get_for_pair(shift_id=shift_id, user_id=user_id)
        if not record:
            # Normally created at assignment time.
            record = self._attendance.create(shift_id=shift_id, user_id=user_id)
        if record.check_in is not None:
            raise AlreadyCheckedInError("Already checked in for this shift")

        status = self._derive(shift, at, None)
        if not self._attendance.set_check_in_if_unset(attendance_id=record.attendance_id, check_in=at, status=status):
            raise AlreadyCheckedInError("Already checked in for this shift")

        logger.info("user %s checked in to shift %s at %s: %s", user_id, shift_id, at.isoformat(), status.value)
        return replace(record, check_in=at, status=status)

    def record_check_out(self, actor: Actor, *, user_id: int, shift_id: int, at: Optional[datetime] = None) -> AttendanceRecord:
        require_self_or_admin(actor, user_id)
        user_id = int(user_id)
        shift_id = int(shift_id)
        at = to_stored_precision(at or now_local())

        record = self._attendance.get_for_pair(shift_id=shift_id, user_id=user_id)
        if not record or record.check_in is None:
            raise NoCheckInError("You must check in before checking out")
        if record.check_out is not None:
            raise AlreadyCheckedOutError("Already checked out for this shift")

        shift = self._get_shift(shift_id)
        status = self._derive(shift, record.check_in, at)
        if not self._attendance.set_check_out_if_unset(attendance_id=record.attendance_id, check_out=at, status=status):
            raise AlreadyCheckedOutError("Already checked out for this shift")

        logger.info("user %s checked out of shift %s at %s: %s", user_id, shift_id, at.isoformat(), status.value)
        return replace(record, check_out=at, status=status)

    def admin_update(self, actor: Actor, *, attendance_id: int, update: AttendanceUpdate) -> AttendanceRecord:
        if update.status is not None:
            return self.set_explicit(
                actor,
                attendance_id=attendance_id,
                status=update.status,
                check_in=update.check_in,
                check_out=update.check_out,
                remarks=update.remarks,
            )
        return self.set_derived(
            actor,
            attendance_id=attendance_id,
            check_in=update.check_in,
            check_out=update.check_out,
            remarks=update.remarks,
        )

    def set_explicit(
        self,
        actor: Actor,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        check_in: Optional[datetime] = None,
        check_out: Optional[datetime] = None,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        """Store ``status`` verbatim, whatever the timestamps say."""

        require_admin(actor)
        record = self._get_record(attendance_id)
        updated = self._merge(record, check_in=check_in, check_out=check_out, remarks=remarks)
        updated = replace(updated, status=AttendanceStatus(status))
        self._save(updated)
        logger.info("attendance %s status set to %s by admin %s", record.attendance_id, updated.status.value, actor.user_id)
        return updated

    def set_derived(
        self,
        actor: Actor,
        *,
        attendance_id: int,
        check_in: Optional[datetime] = None,
        check_out: Optional[datetime] = None,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        """Apply timestamp edits and recompute status when a timestamp changed."""

        require_admin(actor)
        record = self._get_record(attendance_id)
        updated = self._merge(record, check_in=check_in, check_out=check_out, remarks=remarks)
        if check_in is not None or check_out is not None:
            shift = self._get_shift(record.shift_id)
            updated = replace(updated, status=self._derive(shift, updated.check_in, updated.check_out))
        self._save(updated)
        logger.info("attendance %s updated by admin %s: %s", record.attendance_id, actor.user_id, updated.status.value)
        return updated

    def _get_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise AttendanceNotFoundError("Attendance record not found")
        return record

    @staticmethod
    def _merge(
        record: AttendanceRecord,
        *,
        check_in: Optional[datetime],
        check_out: Optional[datetime],
        remarks: Optional[str],
    ) -> AttendanceRecord:
        merged = replace(
            record,
            check_in=to_stored_precision(check_in) if check_in is not None else record.check_in,
            check_out=to_stored_precision(check_out) if check_out is not None else record.check_out,
            remarks=remarks if remarks is not None else record.remarks,
        )
        if merged.check_in and merged.check_out and merged.check_out < merged.check_in:
            raise ValidationError("Check-out cannot be earlier than check-in")
        return merged

    def _save(self, record: AttendanceRecord) -> None:
        ok = self._attendance.admin_update_record(
            attendance_id=record.attendance_id,
            check_in=record.check_in,
            check_out=record.check_out,
            status=record.status,
            remarks=record.remarks,
        )
        if not ok:
            raise AttendanceNotFoundError("Attendance record not found")

    def history_for_user(
        self,
        actor: Actor,
        *,
        user_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[AttendanceHistoryRow]:
        require_self_or_admin(actor, user_id)
        if start and end and end < start:
            raise ValidationError("End date cannot be earlier than start date")
        return self._attendance.list_for_user(user_id=int(user_id), start=start, end=end, status=status, limit=int(limit))
